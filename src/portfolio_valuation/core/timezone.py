"""Timezone utilities for Indian market time."""

from datetime import datetime

import pytz

MARKET_TZ = pytz.timezone("Asia/Kolkata")


def now_market() -> datetime:
    """Return current time in the market (Asia/Kolkata) timezone."""
    return datetime.now(MARKET_TZ)
