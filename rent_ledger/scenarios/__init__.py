"""Scenarios for generating realistic rental data sets."""

from rent_ledger.scenarios.boarding_house import BoardingHouseScenario

__all__ = ["BoardingHouseScenario"]
