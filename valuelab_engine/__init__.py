"""
Valuation Lab Engine
====================

Pure DCF / LBO / risk computation engine with zero external dependencies.

Public API:
- ``DcfAssumptions`` / ``DcfResult``: ``compute_dcf(assumptions)``
- ``LboAssumptions`` / ``LboResult``: ``compute_lbo(assumptions)``
- ``RiskAssumptions`` / ``RiskResult``: ``compute_risk_summary(assumptions)``
- ``solve_irr(schedule, guess=0.20)``: Newton-Raphson IRR, ``nan`` on no convergence
- ``simulate_terminal_values(...)``: GBM Monte Carlo
- ``build_dcf_assumptions`` / ``build_lbo_assumptions`` / ``build_risk_assumptions``
  for canonical input preparation from JSON-compatible dicts
"""

from valuelab_engine.dcf import (
    TERMINAL_EXIT_MULTIPLE,
    TERMINAL_GORDON,
    DcfAssumptions,
    DcfResult,
    DcfYear,
    SensitivityGrid,
    compute_dcf,
    compute_wacc,
    forecast_revenue,
    validate_dcf_assumptions,
)
from valuelab_engine.errors import InputError, InvalidArgument, TerminalValueError, ValidationError
from valuelab_engine.inputs_builder import build_dcf_assumptions, build_lbo_assumptions, build_risk_assumptions
from valuelab_engine.irr import CashflowEvent, npv, solve_irr
from valuelab_engine.lbo import LboAssumptions, LboResult, LboYear, compute_lbo
from valuelab_engine.monte_carlo import MonteCarloSummary, simulate_terminal_values
from valuelab_engine.numeric import clamp, exponential_smooth
from valuelab_engine.risk import (
    RiskAssumptions,
    RiskResult,
    compute_risk_summary,
    kelly_fraction,
    parametric_var,
    validate_risk_assumptions,
    z_score_for_confidence,
)

__all__ = [
    "TERMINAL_EXIT_MULTIPLE",
    "TERMINAL_GORDON",
    "CashflowEvent",
    "DcfAssumptions",
    "DcfResult",
    "DcfYear",
    "InputError",
    "InvalidArgument",
    "LboAssumptions",
    "LboResult",
    "LboYear",
    "MonteCarloSummary",
    "RiskAssumptions",
    "RiskResult",
    "SensitivityGrid",
    "TerminalValueError",
    "ValidationError",
    "build_dcf_assumptions",
    "build_lbo_assumptions",
    "build_risk_assumptions",
    "clamp",
    "compute_dcf",
    "compute_lbo",
    "compute_risk_summary",
    "compute_wacc",
    "exponential_smooth",
    "forecast_revenue",
    "kelly_fraction",
    "npv",
    "parametric_var",
    "simulate_terminal_values",
    "solve_irr",
    "validate_dcf_assumptions",
    "validate_risk_assumptions",
    "z_score_for_confidence",
]
