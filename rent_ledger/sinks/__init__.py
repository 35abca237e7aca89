"""Output sinks for exporting ledger rows and domain events."""

from rent_ledger.sinks.console import ConsoleSink
from rent_ledger.sinks.json_file import JsonFileSink
from rent_ledger.sinks.kafka import KafkaSink

__all__ = ["ConsoleSink", "JsonFileSink", "KafkaSink"]
