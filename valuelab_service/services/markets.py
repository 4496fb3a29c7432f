import datetime
import logging
from typing import Any, Dict, Iterable, Optional

from valuelab_service import config
from valuelab_service.config import MarketIndex
from valuelab_service.connectors.base import BaseQuoteConnector, QuoteUnavailable

logger = logging.getLogger(__name__)


class MarketService:
    def __init__(self, connector: BaseQuoteConnector):
        self.connector = connector

    def get_quote(self, symbol: str) -> Dict[str, Any]:
        """Raises QuoteUnavailable."""
        return self.connector.get_quote(symbol)

    def get_market_strip(self, indices: Optional[Iterable[MarketIndex]] = None) -> Dict[str, Any]:
        """
        Quotes for every configured index. A failing index is reported with
        ``last = None`` instead of failing the whole strip.
        """
        if indices is None:
            indices = config.MARKET_INDICES

        results = []
        for idx in indices:
            entry = idx._asdict()
            try:
                entry.update(self.connector.get_quote(idx.symbol))
            except QuoteUnavailable as e:
                logger.warning(f"Market strip: {e}")
                entry["last"] = None
            results.append(entry)

        return {
            "updated_at": datetime.datetime.now(datetime.timezone.utc).isoformat(timespec="seconds"),
            "indices": results,
        }
