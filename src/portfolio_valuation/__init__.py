"""Portfolio valuation service: cached, rate-limited market data enrichment."""

__version__ = "0.1.0"
