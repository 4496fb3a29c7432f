from valuelab_service.connectors.base import BaseQuoteConnector, ConnectorFactory, QuoteUnavailable, summarize_closes
from valuelab_service.connectors.stooq import StooqQuoteConnector
from valuelab_service.connectors.yahoo import YahooQuoteConnector

__all__ = [
    "BaseQuoteConnector",
    "ConnectorFactory",
    "QuoteUnavailable",
    "StooqQuoteConnector",
    "YahooQuoteConnector",
    "summarize_closes",
]
