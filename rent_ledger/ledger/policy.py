"""Billing policy constants: when rent is first owed and the day it falls due."""

from enum import Enum


class FirstDuePolicy(str, Enum):
    JOIN_MONTH = "join_month"
    FOLLOWING_MONTH = "following_month"


# First rent is owed for the month following the join month.
FIRST_DUE_POLICY = FirstDuePolicy.FOLLOWING_MONTH

# Rent for a month falls due on this calendar day.
DUE_DAY_OF_MONTH = 5
