"""
Tests for the FastAPI application: root, middleware, engine endpoints,
error handling, JSON compliance.
"""

import logging
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from valuelab_service.app import app, create_app
from valuelab_service.connectors import QuoteUnavailable
from valuelab_service.utils import sanitize_for_json

client = TestClient(app)


# ---------------------------------------------------------------------------
# Root & basic endpoints
# ---------------------------------------------------------------------------


def test_read_root():
    response = client.get("/")
    assert response.status_code == 200
    assert response.json() == {"message": "Valuation Lab API is running"}


def test_404():
    response = client.get("/non-existent")
    assert response.status_code == 404
    assert response.json() == {"detail": "Not Found"}


def test_openapi():
    response = client.get("/openapi.json")
    assert response.status_code == 200
    assert "/valuation/dcf" in response.json()["paths"]


# ---------------------------------------------------------------------------
# Logging middleware
# ---------------------------------------------------------------------------


def test_logging_middleware(caplog):
    """Test that requests are logged."""
    with caplog.at_level(logging.INFO):
        client.get("/")

    found_log = False
    for record in caplog.records:
        if "Incoming request: GET /" in record.message:
            found_log = True
            break

    assert found_log, "Request was not logged by middleware"


def test_middleware_internal_error():
    """Middleware should catch unhandled exceptions from routes without try/except."""

    test_app = create_app()

    @test_app.get("/error")
    def error_route():
        raise RuntimeError("Middleware specific crash")

    test_client = TestClient(test_app)
    response = test_client.get("/error")
    assert response.status_code == 500
    assert response.json() == {"detail": "Internal Server Error"}


# ---------------------------------------------------------------------------
# DCF
# ---------------------------------------------------------------------------


def test_dcf_defaults():
    response = client.post("/valuation/dcf", json={})
    assert response.status_code == 200

    data = response.json()
    assert data["wacc"] == pytest.approx(0.084625)
    assert len(data["table"]) == 5
    assert data["equity_value"] == pytest.approx(data["enterprise_value"] - 300.0)
    assert data["sensitivity"]["values"][1][2] == pytest.approx(data["price_per_share"])
    assert data["revenue_forecast"]["mode"] == "trend"
    assert len(data["revenue_forecast"]["revenue"]) == 5


def test_dcf_with_assumptions_and_smoothing():
    payload = {
        "assumptions": {"years": 3, "terminal_method": "exitMultiple", "exit_multiple": 8},
        "forecast_mode": "smoothing",
        "smoothing_alpha": 0.5,
    }
    response = client.post("/valuation/dcf", json=payload)
    assert response.status_code == 200

    data = response.json()
    assert data["years"] == 3
    assert data["terminal_value"] == pytest.approx(data["table"][-1]["ebitda"] * 8)
    assert data["revenue_forecast"]["revenue"][0] == pytest.approx(1050.0)


def test_dcf_validation_errors_are_listed():
    response = client.post("/valuation/dcf", json={"assumptions": {"years": 20, "shares": 0}})
    assert response.status_code == 400
    assert response.json()["detail"] == ["years must be 1-15", "shares must be > 0"]


def test_dcf_terminal_growth_above_wacc():
    assumptions = {"risk_free_rate": 0.02, "beta": 0, "target_debt_weight": 0, "terminal_growth": 0.03}
    response = client.post("/valuation/dcf", json={"assumptions": assumptions})
    assert response.status_code == 400
    assert "WACC must be > terminal growth" in response.json()["detail"]


def test_dcf_unknown_forecast_mode_is_422():
    response = client.post("/valuation/dcf", json={"forecast_mode": "arima"})
    assert response.status_code == 422


def test_dcf_internal_error():
    with patch("valuelab_service.api.router.ValuationService") as MockService:
        MockService.return_value.calculate_dcf.side_effect = Exception("Boom")
        response = client.post("/valuation/dcf", json={})
        assert response.status_code == 500
        assert response.json() == {"detail": "Internal Server Error"}


# ---------------------------------------------------------------------------
# LBO, risk, IRR
# ---------------------------------------------------------------------------


def test_lbo_defaults():
    response = client.post("/valuation/lbo", json={})
    assert response.status_code == 200

    data = response.json()
    assert data["entry_ev"] == pytest.approx(2200.0)
    assert len(data["schedule"]) == 5
    assert data["moic"] > 1
    assert data["equity_irr"] == pytest.approx(data["moic"] ** (1 / 5) - 1, abs=1e-6)


def test_lbo_degenerate_deal_returns_nulls():
    response = client.post("/valuation/lbo", json={"assumptions": {"ebitda_margin0": 0}})
    assert response.status_code == 200

    data = response.json()
    assert data["moic"] is None
    assert data["entry_leverage"] is None
    assert data["equity_irr"] is None


def test_risk_summary_seeded():
    payload = {"assumptions": {"capital": 500000}, "seed": 3}
    first = client.post("/risk/summary", json=payload)
    second = client.post("/risk/summary", json=payload)

    assert first.status_code == 200
    assert first.json() == second.json()
    assert first.json()["value_at_risk"] == pytest.approx(1.645 * 0.25 * 500000)
    assert first.json()["monte_carlo"]["paths"] == 2500


def test_risk_zero_volatility_kelly_is_null():
    response = client.post("/risk/summary", json={"assumptions": {"volatility": 0}, "seed": 1})
    assert response.status_code == 200
    assert response.json()["kelly_raw"] is None
    assert response.json()["suggested_shares"] is None


def test_risk_out_of_range_confidence_is_422():
    response = client.post("/risk/summary", json={"assumptions": {"confidence": 2}})
    assert response.status_code == 422


def test_irr():
    payload = {"cashflows": [{"t": 0, "cf": -100}, {"t": 1, "cf": 110}]}
    response = client.post("/irr", json=payload)
    assert response.status_code == 200
    assert response.json()["irr"] == pytest.approx(0.10, abs=1e-6)


def test_irr_without_sign_change_is_null():
    payload = {"cashflows": [{"t": 0, "cf": 100}, {"t": 1, "cf": 110}]}
    response = client.post("/irr", json=payload)
    assert response.status_code == 200
    assert response.json() == {"irr": None}


def test_irr_decreasing_time_is_400():
    payload = {"cashflows": [{"t": 1, "cf": -100}, {"t": 0, "cf": 110}]}
    response = client.post("/irr", json=payload)
    assert response.status_code == 400
    assert "non-decreasing" in response.json()["detail"]


# ---------------------------------------------------------------------------
# Market data
# ---------------------------------------------------------------------------

QUOTE = {
    "last": 101.0,
    "prev": 100.0,
    "chg": 1.0,
    "chg_pct": 0.01,
    "as_of": "2024-03-01",
    "series": [{"d": "2024-02-29", "c": 100.0}, {"d": "2024-03-01", "c": 101.0}],
}


def test_get_quote():
    with patch("valuelab_service.api.router.ConnectorFactory.get_connector") as mock_factory:
        mock_connector = MagicMock()
        mock_connector.get_quote.return_value = QUOTE
        mock_factory.return_value = mock_connector

        response = client.get("/markets/AAPL.US")
        assert response.status_code == 200
        assert response.json() == QUOTE
        mock_connector.get_quote.assert_called_with("AAPL.US")


def test_quote_source_override():
    with patch("valuelab_service.api.router.ConnectorFactory.get_connector") as mock_factory:
        mock_factory.return_value.get_quote.return_value = QUOTE

        response = client.get("/markets/AAPL.US?source=yahoo")
        assert response.status_code == 200
        mock_factory.assert_called_with("yahoo")


def test_quote_unavailable_is_503():
    with patch("valuelab_service.api.router.ConnectorFactory.get_connector") as mock_factory:
        mock_factory.return_value.get_quote.side_effect = QuoteUnavailable("AAPL.US", "timeout")

        response = client.get("/markets/AAPL.US")
        assert response.status_code == 503
        assert "timeout" in response.json()["detail"]


def test_unknown_quote_source_is_400():
    response = client.get("/markets/AAPL.US?source=bloomberg")
    assert response.status_code == 400
    assert "not found" in response.json()["detail"]


def test_market_strip_tolerates_failing_index():
    def get_quote(symbol):
        if symbol == "^dax":
            raise QuoteUnavailable(symbol)
        return QUOTE

    with patch("valuelab_service.api.router.ConnectorFactory.get_connector") as mock_factory:
        mock_factory.return_value.get_quote.side_effect = get_quote

        response = client.get("/markets")
        assert response.status_code == 200

        data = response.json()
        assert "updated_at" in data
        by_symbol = {idx["symbol"]: idx for idx in data["indices"]}
        assert by_symbol["^dax"]["last"] is None
        assert by_symbol["^spx"]["last"] == 101.0
        assert by_symbol["^spx"]["name"] == "S&P 500"


def test_market_strip_internal_error():
    with patch("valuelab_service.api.router.ConnectorFactory.get_connector") as mock_factory:
        mock_factory.side_effect = Exception("Boom")
        response = client.get("/markets")
        assert response.status_code == 500


# ---------------------------------------------------------------------------
# JSON compliance (NaN / Infinity sanitization)
# ---------------------------------------------------------------------------


def test_dcf_result_with_nan_and_inf():
    mock_result = {"wacc": 0.09, "enterprise_value": float("inf"), "price_per_share": float("nan"), "table": []}

    with patch("valuelab_service.api.router.ValuationService") as MockService:
        MockService.return_value.calculate_dcf.return_value = mock_result

        response = client.post("/valuation/dcf", json={})
        assert response.status_code == 200
        data = response.json()
        assert data["enterprise_value"] is None
        assert data["price_per_share"] is None
        assert data["wacc"] == 0.09


def test_irr_guess_below_floor_is_clamped():
    payload = {"cashflows": [{"t": 0, "cf": -100}, {"t": 1, "cf": 110}], "guess": -1}
    response = client.post("/irr", json=payload)
    assert response.status_code == 200
    assert response.json()["irr"] == pytest.approx(0.10, abs=1e-6)


def test_irr_out_of_float_range_is_null():
    payload = {"cashflows": [{"t": 0, "cf": 100}, {"t": 500, "cf": 100}]}
    response = client.post("/irr", json=payload)
    assert response.status_code == 200
    assert response.json() == {"irr": None}


def test_risk_overflowing_simulation_renders_null():
    payload = {"assumptions": {"expected_return": 80, "horizon_years": 10}, "seed": 1}
    response = client.post("/risk/summary", json=payload)
    assert response.status_code == 200
    assert response.json()["monte_carlo"]["mean"] is None


def test_sanitize_for_json_walks_engine_results():
    result = {"irr": float("nan"), "values": [[1.0, float("inf")]], "axis": (0.1, float("-inf")), "years": 5}
    assert sanitize_for_json(result) == {"irr": None, "values": [[1.0, None]], "axis": [0.1, None], "years": 5}
