"""
Service settings, read once from the environment.
"""

import os
from typing import List, NamedTuple


class MarketIndex(NamedTuple):
    id: str
    name: str
    symbol: str
    currency: str


DEFAULT_MARKET_SYMBOLS = "spx:S&P 500:^spx:USD,dji:Dow Jones:^dji:USD,dax:DAX:^dax:EUR,hsi:Hang Seng:^hsi:HKD"


def parse_market_symbols(raw: str) -> List[MarketIndex]:
    """``id:name:symbol:currency`` entries, comma separated. Malformed entries are skipped."""
    indices = []
    for entry in raw.split(","):
        parts = [p.strip() for p in entry.split(":")]
        if len(parts) != 4 or not all(parts):
            continue
        indices.append(MarketIndex(*parts))
    return indices


LOG_LEVEL = os.environ.get("VALUELAB_LOG_LEVEL", "INFO").upper()
QUOTE_SOURCE = os.environ.get("VALUELAB_QUOTE_SOURCE", "stooq")
MARKET_INDICES = parse_market_symbols(os.environ.get("VALUELAB_MARKET_SYMBOLS", DEFAULT_MARKET_SYMBOLS))
QUOTE_LOOKBACK_DAYS = int(os.environ.get("VALUELAB_QUOTE_LOOKBACK_DAYS", "120"))
QUOTE_SERIES_LENGTH = int(os.environ.get("VALUELAB_QUOTE_SERIES_LENGTH", "30"))
HTTP_TIMEOUT = float(os.environ.get("VALUELAB_HTTP_TIMEOUT", "10"))
SCENARIO_LIST_LIMIT = int(os.environ.get("VALUELAB_SCENARIO_LIST_LIMIT", "100"))
