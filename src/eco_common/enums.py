"""Global enums: must match DB CHECK constraints exactly."""

from enum import Enum


class TransactionType(str, Enum):
    INCREASE = "INCREASE"
    DECREASE = "DECREASE"
