"""
Tests for the Yahoo Finance quote connector.
"""

from unittest.mock import patch

import pandas as pd
import pytest

from valuelab_service.connectors import QuoteUnavailable, YahooQuoteConnector


@pytest.fixture
def mock_yfinance_ticker():
    with patch("valuelab_service.connectors.yahoo.yf.Ticker") as mock_ticker:
        yield mock_ticker


def test_yahoo_quote(mock_yfinance_ticker):
    instance = mock_yfinance_ticker.return_value
    instance.history.return_value = pd.DataFrame(
        {"Close": [100.0, float("nan"), 102.0]},
        index=pd.to_datetime(["2024-02-28", "2024-02-29", "2024-03-01"]),
    )

    quote = YahooQuoteConnector().get_quote("AAPL")

    assert quote["last"] == 102.0
    assert quote["prev"] == 100.0
    assert quote["as_of"] == "2024-03-01"
    assert quote["series"] == [{"d": "2024-02-28", "c": 100.0}, {"d": "2024-03-01", "c": 102.0}]
    mock_yfinance_ticker.assert_called_with("AAPL")


def test_index_symbols_are_mapped(mock_yfinance_ticker):
    instance = mock_yfinance_ticker.return_value
    instance.history.return_value = pd.DataFrame(
        {"Close": [5000.0, 5050.0]},
        index=pd.to_datetime(["2024-02-29", "2024-03-01"]),
    )

    YahooQuoteConnector().get_quote("^spx")
    mock_yfinance_ticker.assert_called_with("^GSPC")


def test_empty_history(mock_yfinance_ticker):
    mock_yfinance_ticker.return_value.history.return_value = pd.DataFrame()
    with pytest.raises(QuoteUnavailable):
        YahooQuoteConnector().get_quote("AAPL")


def test_request_failure(mock_yfinance_ticker):
    mock_yfinance_ticker.return_value.history.side_effect = Exception("rate limited")
    with pytest.raises(QuoteUnavailable) as exc:
        YahooQuoteConnector().get_quote("AAPL")
    assert "rate limited" in exc.value.reason
