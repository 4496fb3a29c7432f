import datetime
import io
import logging
import math
from typing import Any, Dict, List, Tuple

import pandas as pd
import requests

from valuelab_service import config

from .base import BaseQuoteConnector, ConnectorFactory, QuoteUnavailable, summarize_closes

logger = logging.getLogger(__name__)

STOOQ_URL = "https://stooq.com/q/d/l/"


class StooqQuoteConnector(BaseQuoteConnector):
    """Connector for Stooq's daily CSV download endpoint."""

    def __init__(self, session: requests.Session = None):
        self.session = session or requests.Session()

    def get_quote(self, symbol: str) -> Dict[str, Any]:
        end = datetime.date.today()
        start = end - datetime.timedelta(days=config.QUOTE_LOOKBACK_DAYS)

        # Bounded range first; full history as fallback.
        try:
            csv_text = self._fetch_csv(
                {"s": symbol, "i": "d", "d1": start.strftime("%Y%m%d"), "d2": end.strftime("%Y%m%d")}
            )
        except requests.RequestException as e:
            logger.warning(f"Stooq range request failed for {symbol}: {e}; retrying full history")
            try:
                csv_text = self._fetch_csv({"s": symbol, "i": "d"})
            except requests.RequestException as e:
                raise QuoteUnavailable(symbol, str(e)) from e

        return summarize_closes(symbol, self._parse_csv(csv_text))

    def _fetch_csv(self, params: Dict[str, str]) -> str:
        res = self.session.get(STOOQ_URL, params=params, timeout=config.HTTP_TIMEOUT)
        res.raise_for_status()
        return res.text

    def _parse_csv(self, text: str) -> List[Tuple[str, float]]:
        """Expected header: Date,Open,High,Low,Close,Volume. Malformed rows are skipped."""
        try:
            df = pd.read_csv(io.StringIO(text))
        except (pd.errors.EmptyDataError, pd.errors.ParserError):
            return []
        if "Date" not in df.columns or "Close" not in df.columns:
            return []

        closes = pd.to_numeric(df["Close"], errors="coerce")
        rows = []
        for date, close in zip(df["Date"], closes):
            if not isinstance(date, str) or not date or not math.isfinite(close):
                continue
            rows.append((date, float(close)))
        return rows


# Register the connector
ConnectorFactory.register("stooq", StooqQuoteConnector)
