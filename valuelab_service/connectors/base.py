from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence, Tuple, Type

from valuelab_service import config


class QuoteUnavailable(Exception):
    """Transient failure: the source could not produce a quote for the symbol."""

    def __init__(self, symbol: str, reason: str = "no data"):
        self.symbol = symbol
        self.reason = reason
        super().__init__(f"Quote unavailable for {symbol}: {reason}")


class BaseQuoteConnector(ABC):
    """Abstract base class for market quote connectors."""

    @abstractmethod
    def get_quote(self, symbol: str) -> Dict[str, Any]:
        """
        Fetch the latest quote for a symbol.
        Returns a dictionary containing:
        - last, prev (closing prices)
        - chg, chg_pct
        - as_of (date of the last close)
        - series (List[{"d": date, "c": close}], oldest to newest, bounded length)

        Raises QuoteUnavailable on transient failure or insufficient history.
        """
        pass


def summarize_closes(
    symbol: str,
    rows: Sequence[Tuple[str, float]],
    series_length: Optional[int] = None,
) -> Dict[str, Any]:
    """Build the quote payload from (date, close) rows ordered oldest to newest."""
    if len(rows) < 2:
        raise QuoteUnavailable(symbol, "fewer than two closes")
    if series_length is None:
        series_length = config.QUOTE_SERIES_LENGTH

    as_of, last = rows[-1]
    _, prev = rows[-2]
    chg = last - prev

    series: List[Dict[str, Any]] = [{"d": d, "c": c} for d, c in rows[-series_length:]]
    return {
        "last": last,
        "prev": prev,
        "chg": chg,
        "chg_pct": chg / prev if prev != 0 else None,
        "as_of": as_of,
        "series": series,
    }


class ConnectorFactory:
    """Simple factory to manage quote connectors (Singleton Pattern)."""

    _connector_classes: Dict[str, Type[BaseQuoteConnector]] = {}
    _instances: Dict[str, BaseQuoteConnector] = {}

    @classmethod
    def register(cls, name: str, connector_cls: Type[BaseQuoteConnector]) -> None:
        cls._connector_classes[name] = connector_cls

    @classmethod
    def get_connector(cls, name: str) -> BaseQuoteConnector:
        # Check cache first
        if name in cls._instances:
            return cls._instances[name]

        # Create new instance if registered
        connector_cls = cls._connector_classes.get(name)
        if not connector_cls:
            raise ValueError(f"Connector '{name}' not found.")

        instance = connector_cls()
        cls._instances[name] = instance
        return instance
