"""
Valuation Service
=================

Thin orchestration layer: prepare assumption records via the shared
``valuelab_engine`` builders, run the engines, and return results as dicts.

All input-preparation and computation logic lives in **valuelab_engine** so
there is exactly one source of truth; the HTTP handlers, the CLI and stored
scenarios all come through here.
"""

import dataclasses
import logging
import random
from typing import Any, Dict, Iterable, Mapping, Optional

from valuelab_engine import (
    build_dcf_assumptions,
    build_lbo_assumptions,
    build_risk_assumptions,
    compute_dcf,
    compute_lbo,
    compute_risk_summary,
    forecast_revenue,
    solve_irr,
)
from valuelab_engine.dcf import FORECAST_TREND
from valuelab_engine.irr import DEFAULT_GUESS, CashflowEvent

logger = logging.getLogger(__name__)

DEFAULT_SMOOTHING_ALPHA = 0.35


class ValuationService:
    def calculate_dcf(
        self,
        assumptions: Optional[Mapping[str, Any]] = None,
        forecast_mode: str = FORECAST_TREND,
        smoothing_alpha: float = DEFAULT_SMOOTHING_ALPHA,
    ) -> Dict[str, Any]:
        """
        1. Build DcfAssumptions (defaults for anything missing).
        2. Run the engine. ValidationError / TerminalValueError propagate.
        3. Attach the forecast-assistant revenue path.
        """
        inputs = build_dcf_assumptions(assumptions)
        outputs = compute_dcf(inputs)

        result = dataclasses.asdict(outputs)
        result["revenue_forecast"] = {
            "mode": forecast_mode,
            "revenue": forecast_revenue(inputs, forecast_mode, smoothing_alpha),
        }
        return result

    def calculate_lbo(self, assumptions: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        inputs = build_lbo_assumptions(assumptions)
        return dataclasses.asdict(compute_lbo(inputs))

    def calculate_risk(
        self,
        assumptions: Optional[Mapping[str, Any]] = None,
        seed: Optional[int] = None,
    ) -> Dict[str, Any]:
        inputs = build_risk_assumptions(assumptions)
        rng = random.Random(seed) if seed is not None else None
        return dataclasses.asdict(compute_risk_summary(inputs, rng=rng))

    def calculate_irr(self, cashflows: Iterable[Mapping[str, float]], guess: float = DEFAULT_GUESS) -> Dict[str, Any]:
        schedule = [CashflowEvent(float(cf["t"]), float(cf["cf"])) for cf in cashflows]
        rate = solve_irr(schedule, guess=guess)
        return {"irr": rate}
