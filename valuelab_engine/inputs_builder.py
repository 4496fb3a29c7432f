"""
Inputs Builder
==============

Canonical logic for preparing assumption records from JSON-compatible
dictionaries: stored scenario ``inputs``, API payloads, CLI input files.

This module is the **single source of truth** for:
- Default assumptions of a fresh DCF / LBO / risk model
- Key aliases (stored scenarios use camelCase keys such as ``revenue0``,
  ``ebitdaMargin0``, ``tg``, ``debtPctEV``)
- Merging user overrides with stored data

Every field of each assumption record is explicitly mapped here so that the
result is identical regardless of call-site (service, CLI, test).
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional, Sequence

from .dcf import TERMINAL_EXIT_MULTIPLE, TERMINAL_GORDON, DcfAssumptions
from .errors import ValidationError
from .lbo import LboAssumptions
from .risk import RiskAssumptions

logger = logging.getLogger(__name__)

# Canonical defaults.
DEFAULT_DCF: Dict[str, Any] = {
    "years": 5,
    "revenue0": 1000.0,
    "ebitda_margin0": 0.22,
    "ebitda_margin_terminal": 0.24,
    "revenue_growth": 0.10,
    "da_pct_revenue": 0.03,
    "capex_pct_revenue": 0.04,
    "nwc_pct_revenue": 0.10,
    "tax_rate": 0.25,
    "risk_free_rate": 0.04,
    "beta": 1.2,
    "market_risk_premium": 0.05,
    "pre_tax_cost_of_debt": 0.065,
    "target_debt_weight": 0.30,
    "terminal_method": TERMINAL_GORDON,
    "terminal_growth": 0.03,
    "exit_multiple": 10.0,
    "net_debt": 300.0,
    "shares": 100.0,
    "mid_year": True,
}

DEFAULT_LBO: Dict[str, Any] = {
    "hold_years": 5,
    "revenue0": 1000.0,
    "ebitda_margin0": 0.22,
    "entry_multiple": 10.0,
    "revenue_cagr": 0.08,
    "exit_margin": 0.25,
    "da_pct_revenue": 0.03,
    "capex_pct_revenue": 0.04,
    "nwc_pct_revenue": 0.10,
    "tax_rate": 0.25,
    "debt_pct_ev": 0.65,
    "debt_rate": 0.085,
    "mandatory_amort_pct": 0.05,
    "exit_multiple": 10.0,
    "fee_pct_ev": 0.02,
}

DEFAULT_RISK: Dict[str, Any] = {
    "capital": 1_000_000.0,
    "price": 100.0,
    "volatility": 0.25,
    "expected_return": 0.10,
    "horizon_years": 1.0,
    "confidence": 0.95,
    "kelly_scale": 0.25,
}

# field -> alternative keys accepted in stored / external payloads
DCF_ALIASES: Dict[str, Sequence[str]] = {
    "ebitda_margin0": ("ebitdaMargin0",),
    "ebitda_margin_terminal": ("ebitdaMarginT",),
    "revenue_growth": ("revGrowth",),
    "da_pct_revenue": ("daPctRev",),
    "capex_pct_revenue": ("capexPctRev",),
    "nwc_pct_revenue": ("nwcPctRev",),
    "tax_rate": ("taxRate",),
    "risk_free_rate": ("rf",),
    "market_risk_premium": ("mrp",),
    "pre_tax_cost_of_debt": ("preTaxKd",),
    "target_debt_weight": ("targetDebtPct",),
    "terminal_method": ("terminalMethod",),
    "terminal_growth": ("tg",),
    "exit_multiple": ("exitMultiple",),
    "net_debt": ("netDebt",),
    "mid_year": ("midYear",),
}

LBO_ALIASES: Dict[str, Sequence[str]] = {
    "hold_years": ("holdYears",),
    "ebitda_margin0": ("ebitdaMargin0",),
    "entry_multiple": ("entryMultiple",),
    "revenue_cagr": ("revCagr",),
    "exit_margin": ("marginTo",),
    "da_pct_revenue": ("daPctRev",),
    "capex_pct_revenue": ("capexPctRev",),
    "nwc_pct_revenue": ("nwcPctRev",),
    "tax_rate": ("taxRate",),
    "debt_pct_ev": ("debtPctEV",),
    "debt_rate": ("debtRate",),
    "mandatory_amort_pct": ("mandatoryAmortPct",),
    "exit_multiple": ("exitMultiple",),
    "fee_pct_ev": ("txnFeesPctEV",),
}

RISK_ALIASES: Dict[str, Sequence[str]] = {
    "expected_return": ("expReturn",),
    "horizon_years": ("horizonYears",),
    "kelly_scale": ("kellyFraction",),
}

TERMINAL_METHOD_ALIASES = {
    "gordon": TERMINAL_GORDON,
    "exit": TERMINAL_EXIT_MULTIPLE,
    "exitmultiple": TERMINAL_EXIT_MULTIPLE,
    "exit_multiple": TERMINAL_EXIT_MULTIPLE,
}

INTEGER_FIELDS = {"years", "hold_years"}
BOOLEAN_FIELDS = {"mid_year"}
STRING_FIELDS = {"terminal_method"}


def build_dcf_assumptions(
    data: Optional[Mapping[str, Any]] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> DcfAssumptions:
    values = _merge(DEFAULT_DCF, DCF_ALIASES, data, overrides)
    values["terminal_method"] = normalize_terminal_method(values["terminal_method"])
    return DcfAssumptions(**values)


def build_lbo_assumptions(
    data: Optional[Mapping[str, Any]] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> LboAssumptions:
    return LboAssumptions(**_merge(DEFAULT_LBO, LBO_ALIASES, data, overrides))


def build_risk_assumptions(
    data: Optional[Mapping[str, Any]] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> RiskAssumptions:
    return RiskAssumptions(**_merge(DEFAULT_RISK, RISK_ALIASES, data, overrides))


def normalize_terminal_method(method: Any) -> str:
    key = str(method).strip()
    if key in (TERMINAL_GORDON, TERMINAL_EXIT_MULTIPLE):
        return key
    # Unknown methods pass through; DCF validation reports them.
    return TERMINAL_METHOD_ALIASES.get(key.lower(), key)


def _merge(
    defaults: Mapping[str, Any],
    aliases: Mapping[str, Sequence[str]],
    data: Optional[Mapping[str, Any]],
    overrides: Optional[Mapping[str, Any]],
) -> Dict[str, Any]:
    data = data or {}
    overrides = overrides or {}

    # Helper: pick Override > Data > Default
    def get_val(field: str) -> Any:
        keys = (field,) + tuple(aliases.get(field, ()))
        for source in (overrides, data):
            for key in keys:
                if key in source and source[key] is not None:
                    return source[key]
        return defaults[field]

    values = {}
    errors = []
    for field in defaults:
        try:
            values[field] = _coerce(field, get_val(field))
        except (TypeError, ValueError):
            errors.append(f"{field} must be a number")
    if errors:
        raise ValidationError(errors)

    known = set(defaults)
    for source in (data, overrides):
        for key in source:
            if key not in known and not any(key in a for a in aliases.values()):
                logger.debug("Ignoring unknown assumption key: %s", key)
    return values


def _coerce(field: str, value: Any) -> Any:
    if field in BOOLEAN_FIELDS:
        if isinstance(value, str):
            return value.strip().lower() in ("1", "true", "yes", "on")
        return bool(value)
    if field in STRING_FIELDS:
        return str(value)
    if isinstance(value, bool):
        raise TypeError(f"{field} must be numeric")
    number = float(value)
    if field in INTEGER_FIELDS and number.is_integer():
        # Fractional horizons stay as-is: validation sees the raw value, the engine rounds.
        return int(number)
    return number
