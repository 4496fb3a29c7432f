"""
Risk Engine
===========

Parametric VaR, Kelly position sizing and a GBM Monte Carlo distribution of
terminal portfolio value.
"""

from __future__ import annotations

from dataclasses import dataclass
from math import nan, sqrt
from typing import List, Optional

from .errors import ValidationError
from .monte_carlo import MonteCarloSummary, UniformSource, simulate_terminal_values
from .numeric import clamp, round_half_up

MONTE_CARLO_PATHS: int = 2500
MAX_SCALED_KELLY: float = 2.0

# Discrete step lookup, not interpolated.
Z_SCORES = (
    (0.99, 2.326),
    (0.975, 1.96),
    (0.95, 1.645),
    (0.90, 1.282),
)
DEFAULT_Z_SCORE: float = 1.0
CONFIDENCE_BOUNDS = (0.5, 0.999)


@dataclass(frozen=True)
class RiskAssumptions:
    capital: float
    price: float
    volatility: float
    expected_return: float
    horizon_years: float
    confidence: float
    kelly_scale: float


@dataclass(frozen=True)
class RiskResult:
    z_score: float
    value_at_risk: float
    kelly_raw: float
    kelly_scaled: float
    suggested_shares: float
    monte_carlo: MonteCarloSummary


def validate_risk_assumptions(inputs: RiskAssumptions) -> List[str]:
    """Every violated domain rule, as human-readable messages. Empty when valid."""
    lo, hi = CONFIDENCE_BOUNDS
    errors = []
    if not (inputs.volatility >= 0):
        errors.append("volatility must be >= 0")
    if not (inputs.horizon_years > 0):
        errors.append("horizonYears must be > 0")
    if not (lo <= inputs.confidence <= hi):
        errors.append(f"confidence must be {lo}-{hi}")
    if not (0.0 <= inputs.kelly_scale <= 1.0):
        errors.append("kellyFraction must be 0-1")
    return errors


def z_score_for_confidence(confidence: float) -> float:
    for threshold, z in Z_SCORES:
        if confidence >= threshold:
            return z
    return DEFAULT_Z_SCORE


def parametric_var(*, capital: float, volatility: float, horizon_years: float, confidence: float) -> float:
    return z_score_for_confidence(confidence) * volatility * sqrt(horizon_years) * capital


def kelly_fraction(expected_return: float, volatility: float) -> float:
    if volatility == 0:
        return nan
    return expected_return / (volatility * volatility)


def compute_risk_summary(
    inputs: RiskAssumptions,
    rng: Optional[UniformSource] = None,
) -> RiskResult:
    errors = validate_risk_assumptions(inputs)
    if errors:
        raise ValidationError(errors)

    kelly_raw = kelly_fraction(inputs.expected_return, inputs.volatility)
    kelly_scaled = clamp(kelly_raw * inputs.kelly_scale, 0.0, MAX_SCALED_KELLY)
    shares = inputs.capital * kelly_scaled / inputs.price if inputs.price > 0 else nan

    mc = simulate_terminal_values(
        s0=inputs.capital,
        mu=inputs.expected_return,
        sigma=inputs.volatility,
        years=inputs.horizon_years,
        steps=max(1, round_half_up(inputs.horizon_years)),
        n=MONTE_CARLO_PATHS,
        rng=rng,
    )

    return RiskResult(
        z_score=z_score_for_confidence(inputs.confidence),
        value_at_risk=parametric_var(
            capital=inputs.capital,
            volatility=inputs.volatility,
            horizon_years=inputs.horizon_years,
            confidence=inputs.confidence,
        ),
        kelly_raw=kelly_raw,
        kelly_scaled=kelly_scaled,
        suggested_shares=shares,
        monte_carlo=mc,
    )
