import datetime
import logging
import math
from typing import Any, Dict

import yfinance as yf

from valuelab_service import config

from .base import BaseQuoteConnector, ConnectorFactory, QuoteUnavailable, summarize_closes

logger = logging.getLogger(__name__)

# Stooq-style index symbols used by the market strip, mapped to Yahoo tickers.
YAHOO_SYMBOLS = {"^spx": "^GSPC", "^dji": "^DJI", "^dax": "^GDAXI", "^hsi": "^HSI"}


class YahooQuoteConnector(BaseQuoteConnector):
    """Connector for fetching daily closes from Yahoo Finance."""

    def get_quote(self, symbol: str) -> Dict[str, Any]:
        ticker = YAHOO_SYMBOLS.get(symbol.lower(), symbol)
        end = datetime.date.today() + datetime.timedelta(days=1)
        start = end - datetime.timedelta(days=config.QUOTE_LOOKBACK_DAYS + 1)

        try:
            hist = yf.Ticker(ticker).history(start=start.strftime("%Y-%m-%d"), end=end.strftime("%Y-%m-%d"))
        except Exception as e:
            logger.warning(f"Yahoo history request failed for {ticker}: {e}")
            raise QuoteUnavailable(symbol, str(e)) from e

        if hist is None or hist.empty or "Close" not in hist.columns:
            raise QuoteUnavailable(symbol)

        rows = []
        for idx, close in hist["Close"].items():
            close = float(close)
            if not math.isfinite(close):
                continue
            date = idx.strftime("%Y-%m-%d") if hasattr(idx, "strftime") else str(idx)
            rows.append((date, close))
        return summarize_closes(symbol, rows)


# Register the connector
ConnectorFactory.register("yahoo", YahooQuoteConnector)
