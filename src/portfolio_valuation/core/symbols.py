"""Symbol normalization and provider symbol mapping."""

import re
from typing import Optional

from portfolio_valuation.domain.models.enums import DataKind, Venue

# Index symbols quoted without an exchange suffix
NSE_INDEX_SYMBOLS = frozenset({"NIFTY", "BANKNIFTY", "SENSEX"})

# Known NSE tickers; symbols absent from the table map to themselves
NSE_SYMBOL_MAPPINGS: dict[str, str] = {
    "RELIANCE": "RELIANCE",
    "TCS": "TCS",
    "HDFCBANK": "HDFCBANK",
    "INFY": "INFY",
    "ICICIBANK": "ICICIBANK",
    "ITC": "ITC",
    "BHARTIARTL": "BHARTIARTL",
    "AXISBANK": "AXISBANK",
    "MARUTI": "MARUTI",
    "SUNPHARMA": "SUNPHARMA",
    "WIPRO": "WIPRO",
    "ULTRACEMCO": "ULTRACEMCO",
    "TITAN": "TITAN",
    "BAJFINANCE": "BAJFINANCE",
    "NESTLEIND": "NESTLEIND",
    "POWERGRID": "POWERGRID",
    "ASIANPAINT": "ASIANPAINT",
    "HINDUNILVR": "HINDUNILVR",
    "JSWSTEEL": "JSWSTEEL",
    "TATAMOTORS": "TATAMOTORS",
}

_YAHOO_SUFFIX = {Venue.NSE: "NS", Venue.BSE: "BO"}
_SUFFIX_VENUE = {"NS": Venue.NSE, "NSE": Venue.NSE, "BO": Venue.BSE, "BSE": Venue.BSE}


def normalize_symbol(symbol: str, venue: Venue) -> str:
    """Trim, uppercase and look the symbol up in the exchange's ticker table."""
    clean = symbol.strip().upper()
    if venue == Venue.NSE:
        return NSE_SYMBOL_MAPPINGS.get(clean, clean)
    return clean


def to_yahoo_symbol(symbol: str, venue: Venue) -> str:
    """Map a symbol to Yahoo Finance notation (``RELIANCE.NS``, ``500325.BO``)."""
    clean = symbol.strip().upper()
    if venue == Venue.NSE and clean in NSE_INDEX_SYMBOLS:
        return clean
    return f"{clean}.{_YAHOO_SUFFIX[venue]}"


def parse_combined_symbol(combined: str) -> Optional[tuple[str, Venue]]:
    """
    Split ``SYMBOL.NS`` / ``SYMBOL:NSE`` style strings into (symbol, venue).

    Returns None when the string is not exactly two parts or the suffix is
    not a known exchange.
    """
    parts = re.split(r"[.:]", combined.strip())
    if len(parts) != 2 or not parts[0]:
        return None
    symbol, suffix = parts
    venue = _SUFFIX_VENUE.get(suffix.upper())
    if venue is None:
        return None
    return symbol.upper(), venue


def cache_key(kind: DataKind, symbol: str, venue: Venue) -> str:
    """Deterministic cache key for one kind of data about one security."""
    return f"{kind.value}:{normalize_symbol(symbol, venue)}:{venue.value}"
