"""
API Router: all endpoint definitions for the valuation lab service.
"""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from valuelab_engine import ValidationError
from valuelab_service import config
from valuelab_service.api.schemas import (
    DcfRequest,
    IrrRequest,
    LboRequest,
    RiskRequest,
    ScenarioCreate,
    ScenarioUpdate,
)
from valuelab_service.connectors import ConnectorFactory, QuoteUnavailable
from valuelab_service.repository import RepositoryFactory, ScenarioNotFound
from valuelab_service.services.markets import MarketService
from valuelab_service.services.scenarios import ScenarioService
from valuelab_service.services.valuation import ValuationService
from valuelab_service.utils.json import sanitize_for_json

logger = logging.getLogger(__name__)
router = APIRouter()


def _bad_request(context: str, e: ValueError) -> HTTPException:
    logger.warning(f"Bad Request for {context}: {e}")
    if isinstance(e, ValidationError):
        return HTTPException(status_code=400, detail=e.messages)
    return HTTPException(status_code=400, detail=str(e))


def _internal_error(context: str, e: Exception) -> HTTPException:
    logger.error(f"Internal Error {context}: {e}")
    return HTTPException(status_code=500, detail="Internal Server Error")


def _dump(model) -> Optional[dict]:
    return model.model_dump(exclude_unset=True) if model else None


# ---------------------------------------------------------------------------
# Engines
# ---------------------------------------------------------------------------


@router.post(
    "/valuation/dcf",
    summary="Calculate DCF",
    description="Discounted cash flow valuation with a WACC x growth sensitivity grid.",
    response_description="Per-year table, WACC components, terminal value, EV, equity value and price per share.",
)
def calculate_dcf(request: DcfRequest):
    try:
        service = ValuationService()
        result = service.calculate_dcf(_dump(request.assumptions), request.forecast_mode, request.smoothing_alpha)
        return sanitize_for_json(result)
    except ValueError as e:
        raise _bad_request("DCF", e)
    except Exception as e:
        raise _internal_error("computing DCF", e)


@router.post(
    "/valuation/lbo",
    summary="Calculate LBO",
    description="Single-tranche leveraged buyout with cash sweep, equity IRR and MOIC.",
    response_description="Entry/exit bridge, debt schedule and returns.",
)
def calculate_lbo(request: LboRequest):
    try:
        result = ValuationService().calculate_lbo(_dump(request.assumptions))
        return sanitize_for_json(result)
    except ValueError as e:
        raise _bad_request("LBO", e)
    except Exception as e:
        raise _internal_error("computing LBO", e)


@router.post(
    "/risk/summary",
    summary="Risk Summary",
    description="Parametric VaR, Kelly sizing and a Monte Carlo distribution of terminal portfolio value.",
)
def calculate_risk(request: RiskRequest):
    try:
        result = ValuationService().calculate_risk(_dump(request.assumptions), seed=request.seed)
        return sanitize_for_json(result)
    except ValueError as e:
        raise _bad_request("risk summary", e)
    except Exception as e:
        raise _internal_error("computing risk summary", e)


@router.post(
    "/irr",
    summary="Solve IRR",
    description="Newton-Raphson IRR over a cashflow schedule. Returns null when no stable root is found.",
)
def calculate_irr(request: IrrRequest):
    try:
        cashflows = [item.model_dump() for item in request.cashflows]
        result = ValuationService().calculate_irr(cashflows, guess=request.guess)
        return sanitize_for_json(result)
    except ValueError as e:
        raise _bad_request("IRR", e)
    except Exception as e:
        raise _internal_error("solving IRR", e)


# ---------------------------------------------------------------------------
# Market data
# ---------------------------------------------------------------------------


@router.get(
    "/markets",
    summary="Market Strip",
    description="Latest close, change and recent history for the configured indices.",
)
def get_markets(source: str = Query(config.QUOTE_SOURCE, description="Quote source connector")):
    try:
        connector = ConnectorFactory.get_connector(source)
        return sanitize_for_json(MarketService(connector).get_market_strip())
    except ValueError as e:
        raise _bad_request("markets", e)
    except Exception as e:
        raise _internal_error("fetching markets", e)


@router.get(
    "/markets/{symbol}",
    summary="Get Quote",
    description="Latest close, previous close and bounded recent history for one symbol.",
)
def get_quote(symbol: str, source: str = Query(config.QUOTE_SOURCE, description="Quote source connector")):
    try:
        connector = ConnectorFactory.get_connector(source)
        return sanitize_for_json(MarketService(connector).get_quote(symbol))
    except QuoteUnavailable as e:
        logger.warning(str(e))
        raise HTTPException(status_code=503, detail=str(e))
    except ValueError as e:
        raise _bad_request(symbol, e)
    except Exception as e:
        raise _internal_error(f"fetching quote for {symbol}", e)


# ---------------------------------------------------------------------------
# Scenario library
# ---------------------------------------------------------------------------


def _scenarios() -> ScenarioService:
    return ScenarioService(RepositoryFactory.get_repository())


@router.get("/scenarios", summary="List Scenarios")
def list_scenarios(kind: Optional[str] = Query(None, description="Filter by kind (DCF, LBO, RISK)")):
    try:
        return {"items": sanitize_for_json(_scenarios().list(kind=kind))}
    except Exception as e:
        raise _internal_error("listing scenarios", e)


@router.post("/scenarios", summary="Save Scenario")
def create_scenario(request: ScenarioCreate):
    try:
        return {"item": _scenarios().create(request.model_dump())}
    except ValueError as e:
        raise _bad_request("scenario", e)
    except Exception as e:
        raise _internal_error("saving scenario", e)


@router.get("/scenarios/{scenario_id}", summary="Get Scenario")
def get_scenario(scenario_id: str):
    try:
        return {"item": _scenarios().get(scenario_id)}
    except ScenarioNotFound:
        raise HTTPException(status_code=404, detail="Not found")
    except Exception as e:
        raise _internal_error(f"reading scenario {scenario_id}", e)


@router.put("/scenarios/{scenario_id}", summary="Update Scenario")
def update_scenario(scenario_id: str, request: ScenarioUpdate):
    try:
        return {"item": _scenarios().update(scenario_id, request.model_dump(exclude_unset=True))}
    except ScenarioNotFound:
        raise HTTPException(status_code=404, detail="Not found")
    except Exception as e:
        raise _internal_error(f"updating scenario {scenario_id}", e)


@router.delete("/scenarios/{scenario_id}", summary="Delete Scenario")
def delete_scenario(scenario_id: str):
    try:
        _scenarios().delete(scenario_id)
        return {"ok": True}
    except ScenarioNotFound:
        raise HTTPException(status_code=404, detail="Not found")
    except Exception as e:
        raise _internal_error(f"deleting scenario {scenario_id}", e)


@router.post(
    "/scenarios/{scenario_id}/run",
    summary="Run Scenario",
    description="Evaluate a stored scenario with the engine matching its kind.",
)
def run_scenario(scenario_id: str):
    try:
        return sanitize_for_json(_scenarios().run(scenario_id))
    except ScenarioNotFound:
        raise HTTPException(status_code=404, detail="Not found")
    except ValueError as e:
        raise _bad_request(f"scenario {scenario_id}", e)
    except Exception as e:
        raise _internal_error(f"running scenario {scenario_id}", e)
