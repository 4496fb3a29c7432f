"""
DCF Engine
==========

Unlevered free cash flow valuation:

- multi-year operating forecast (revenue, EBITDA, D&A, EBIT, loss-safe tax)
- UFCF = NOPAT + D&A - capex - change in NWC
- WACC from CAPM cost of equity and after-tax cost of debt
- terminal value by Gordon growth or exit multiple
- optional mid-year discounting
- WACC x growth sensitivity grid on price per share

``compute_dcf`` is the single entry point used by the API, the CLI and stored
scenarios alike. It raises ``ValidationError`` for out-of-domain assumptions
and ``TerminalValueError`` when the Gordon denominator is not positive; every
other degenerate case surfaces as a non-finite float.
"""

from __future__ import annotations

from dataclasses import dataclass
from math import nan
from typing import List, Sequence

from .errors import TerminalValueError, ValidationError
from .numeric import clamp, exponential_smooth
from .operating import horizon, interpolate_margins, loss_safe_tax, nwc_changes, project_revenues

MIN_YEARS: int = 1
MAX_YEARS: int = 15
MAX_TAX_RATE: float = 0.6
MAX_DEBT_WEIGHT: float = 0.95

TERMINAL_GORDON: str = "gordon"
TERMINAL_EXIT_MULTIPLE: str = "exitMultiple"
TERMINAL_METHODS = (TERMINAL_GORDON, TERMINAL_EXIT_MULTIPLE)

SENSITIVITY_WACC_STEPS = (-0.02, -0.01, 0.0, 0.01, 0.02)
SENSITIVITY_GROWTH_STEPS = (-0.01, 0.0, 0.01)
SENSITIVITY_WACC_BOUNDS = (0.01, 0.50)
SENSITIVITY_GROWTH_BOUNDS = (0.0, 0.08)

FORECAST_TREND: str = "trend"
FORECAST_SMOOTHING: str = "smoothing"
SMOOTHING_ALPHA_BOUNDS = (0.05, 0.95)


@dataclass(frozen=True)
class DcfAssumptions:
    years: int
    revenue0: float
    ebitda_margin0: float
    ebitda_margin_terminal: float
    revenue_growth: float

    da_pct_revenue: float
    capex_pct_revenue: float
    nwc_pct_revenue: float
    tax_rate: float

    # Cost of capital
    risk_free_rate: float
    beta: float
    market_risk_premium: float
    pre_tax_cost_of_debt: float
    target_debt_weight: float

    # Terminal value: only the parameter selected by terminal_method is used.
    terminal_method: str = TERMINAL_GORDON
    terminal_growth: float = 0.0
    exit_multiple: float = 0.0

    # Equity bridge
    net_debt: float = 0.0
    shares: float = 1.0

    mid_year: bool = False


@dataclass(frozen=True)
class DcfYear:
    year: int
    revenue: float
    ebitda_margin: float
    ebitda: float
    da: float
    ebit: float
    tax: float
    nopat: float
    capex: float
    change_in_nwc: float
    ufcf: float
    discount_factor: float
    pv_ufcf: float


@dataclass(frozen=True)
class SensitivityGrid:
    wacc_axis: List[float]  # columns
    growth_axis: List[float]  # rows
    values: List[List[float]]  # price per share, [growth row][wacc column]


@dataclass(frozen=True)
class DcfResult:
    years: int
    table: List[DcfYear]

    cost_of_equity: float
    after_tax_cost_of_debt: float
    equity_weight: float
    debt_weight: float
    wacc: float

    terminal_value: float
    pv_terminal_value: float
    sum_pv_ufcf: float
    enterprise_value: float
    equity_value: float
    price_per_share: float

    sensitivity: SensitivityGrid


def validate_dcf_assumptions(inputs: DcfAssumptions) -> List[str]:
    """Every violated domain rule, as human-readable messages. Empty when valid."""
    errors = []
    if not (MIN_YEARS <= inputs.years <= MAX_YEARS):
        errors.append(f"years must be {MIN_YEARS}-{MAX_YEARS}")
    if not (inputs.revenue0 > 0):
        errors.append("revenue0 must be > 0")
    if not (inputs.shares > 0):
        errors.append("shares must be > 0")
    if not (0.0 <= inputs.tax_rate <= MAX_TAX_RATE):
        errors.append(f"taxRate must be 0-{MAX_TAX_RATE}")
    if not (0.0 <= inputs.target_debt_weight <= MAX_DEBT_WEIGHT):
        errors.append(f"targetDebtPct must be 0-{MAX_DEBT_WEIGHT}")
    if inputs.terminal_method not in TERMINAL_METHODS:
        errors.append(f"terminalMethod must be one of {', '.join(TERMINAL_METHODS)}")
    return errors


def compute_dcf(inputs: DcfAssumptions) -> DcfResult:
    errors = validate_dcf_assumptions(inputs)
    if errors:
        raise ValidationError(errors)

    result = _compute(inputs)

    if inputs.terminal_method == TERMINAL_GORDON and result.wacc <= inputs.terminal_growth:
        raise TerminalValueError(result.wacc, inputs.terminal_growth)
    return result


def compute_wacc(inputs: DcfAssumptions) -> float:
    return _cost_of_capital(inputs)[-1]


def forecast_revenue(inputs: DcfAssumptions, mode: str = FORECAST_TREND, alpha: float = 0.35) -> List[float]:
    """
    Revenue path shown next to the base projection.

    ``trend`` is the projection itself; ``smoothing`` exponentially smooths
    [revenue0, rev_1..rev_N] and drops the base year.
    """
    n = horizon(inputs.years, MIN_YEARS, MAX_YEARS)
    revenues = project_revenues(inputs.revenue0, inputs.revenue_growth, n)
    if mode == FORECAST_SMOOTHING:
        smoothed = exponential_smooth([inputs.revenue0] + revenues, clamp(alpha, *SMOOTHING_ALPHA_BOUNDS))
        return smoothed[1:]
    if mode != FORECAST_TREND:
        raise ValidationError([f"forecast mode must be '{FORECAST_TREND}' or '{FORECAST_SMOOTHING}'"])
    return revenues


def _cost_of_capital(inputs: DcfAssumptions):
    ke = inputs.risk_free_rate + inputs.beta * inputs.market_risk_premium
    kd = inputs.pre_tax_cost_of_debt * (1.0 - inputs.tax_rate)
    wd = clamp(inputs.target_debt_weight, 0.0, MAX_DEBT_WEIGHT)
    we = 1.0 - wd
    return ke, kd, we, wd, we * ke + wd * kd


def _discount_factors(wacc: float, n: int, mid_year: bool) -> List[float]:
    factors = []
    for t in range(1, n + 1):
        exponent = t - 0.5 if mid_year else t
        factors.append(1.0 / (1.0 + wacc) ** exponent)
    return factors


def _gordon_terminal_value(last_ufcf: float, wacc: float, growth: float) -> float:
    denom = wacc - growth
    if denom <= 0:
        return nan
    return last_ufcf * (1.0 + growth) / denom


def _per_share(equity_value: float, shares: float) -> float:
    return equity_value / shares if shares else nan


def _compute(inputs: DcfAssumptions) -> DcfResult:
    n = horizon(inputs.years, MIN_YEARS, MAX_YEARS)

    revenues = project_revenues(inputs.revenue0, inputs.revenue_growth, n)
    margins = interpolate_margins(inputs.ebitda_margin0, inputs.ebitda_margin_terminal, n)
    d_nwc = nwc_changes(inputs.revenue0, revenues, inputs.nwc_pct_revenue)

    ke, kd, we, wd, wacc = _cost_of_capital(inputs)
    factors = _discount_factors(wacc, n, inputs.mid_year)

    table = []
    for i, revenue in enumerate(revenues):
        ebitda = revenue * margins[i]
        da = revenue * inputs.da_pct_revenue
        ebit = ebitda - da
        tax = loss_safe_tax(ebit, inputs.tax_rate)
        nopat = ebit - tax
        capex = revenue * inputs.capex_pct_revenue
        ufcf = nopat + da - capex - d_nwc[i]
        table.append(
            DcfYear(
                year=i + 1,
                revenue=revenue,
                ebitda_margin=margins[i],
                ebitda=ebitda,
                da=da,
                ebit=ebit,
                tax=tax,
                nopat=nopat,
                capex=capex,
                change_in_nwc=d_nwc[i],
                ufcf=ufcf,
                discount_factor=factors[i],
                pv_ufcf=ufcf * factors[i],
            )
        )

    last = table[-1]
    if inputs.terminal_method == TERMINAL_EXIT_MULTIPLE:
        terminal_value = last.ebitda * inputs.exit_multiple
    else:
        terminal_value = _gordon_terminal_value(last.ufcf, wacc, inputs.terminal_growth)

    pv_terminal_value = terminal_value * last.discount_factor
    sum_pv_ufcf = sum(row.pv_ufcf for row in table)
    enterprise_value = sum_pv_ufcf + pv_terminal_value
    equity_value = enterprise_value - inputs.net_debt

    return DcfResult(
        years=n,
        table=table,
        cost_of_equity=ke,
        after_tax_cost_of_debt=kd,
        equity_weight=we,
        debt_weight=wd,
        wacc=wacc,
        terminal_value=terminal_value,
        pv_terminal_value=pv_terminal_value,
        sum_pv_ufcf=sum_pv_ufcf,
        enterprise_value=enterprise_value,
        equity_value=equity_value,
        price_per_share=_per_share(equity_value, inputs.shares),
        sensitivity=_sensitivity_grid(
            wacc=wacc,
            growth=inputs.terminal_growth,
            last_ufcf=last.ufcf,
            last_discount_factor=last.discount_factor,
            sum_pv_ufcf=sum_pv_ufcf,
            net_debt=inputs.net_debt,
            shares=inputs.shares,
        ),
    )


def _sensitivity_grid(
    *,
    wacc: float,
    growth: float,
    last_ufcf: float,
    last_discount_factor: float,
    sum_pv_ufcf: float,
    net_debt: float,
    shares: float,
) -> SensitivityGrid:
    # The explicit-period PVs and the final-year discount factor are reused from
    # the base case; only the Gordon terminal value is re-derived per cell.
    wacc_axis = _axis(wacc, SENSITIVITY_WACC_STEPS, SENSITIVITY_WACC_BOUNDS)
    growth_axis = _axis(growth, SENSITIVITY_GROWTH_STEPS, SENSITIVITY_GROWTH_BOUNDS)

    values = []
    for g in growth_axis:
        row = []
        for w in wacc_axis:
            tv = _gordon_terminal_value(last_ufcf, w, g)
            equity = sum_pv_ufcf + tv * last_discount_factor - net_debt
            row.append(_per_share(equity, shares))
        values.append(row)
    return SensitivityGrid(wacc_axis=wacc_axis, growth_axis=growth_axis, values=values)


def _axis(center: float, steps: Sequence[float], bounds: Sequence[float]) -> List[float]:
    lo, hi = bounds
    return [clamp(center + step, lo, hi) for step in steps]
