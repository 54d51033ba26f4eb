"""Enumerations for domain models."""

from enum import Enum


class Venue(str, Enum):
    """Exchanges a holding can trade on."""

    NSE = "NSE"
    BSE = "BSE"


class DataKind(str, Enum):
    """Kinds of upstream data, each cached with its own lifetime."""

    QUOTE = "quote"  # Short-lived, changes intraday
    FUNDAMENTALS = "fundamentals"  # Long-lived, changes per reporting period
