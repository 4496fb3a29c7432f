"""
LBO Engine
==========

Single-tranche leveraged buyout:

- entry: EBITDA x entry multiple = EV; fees and debt as % of EV;
  sponsor equity = EV + fees - debt
- operating forecast shared with the DCF engine (revenue CAGR, linear margin path)
- debt sweep recurrence: interest and mandatory amortization on the beginning
  balance, excess cash swept, paydown capped at the outstanding balance
- exit: exit EBITDA x exit multiple; equity IRR and MOIC

Degenerate deals (zero entry EBITDA, zero sponsor equity) report non-finite
leverage and multiple instead of raising.
"""

from __future__ import annotations

from dataclasses import dataclass
from math import nan
from typing import List

from .irr import CashflowEvent, solve_irr
from .numeric import clamp
from .operating import horizon, interpolate_margins, loss_safe_tax, nwc_changes, project_revenues

MIN_HOLD_YEARS: int = 1
MAX_HOLD_YEARS: int = 10
MAX_DEBT_PCT_EV: float = 0.95
MAX_MANDATORY_AMORT_PCT: float = 0.5
IRR_GUESS: float = 0.25


@dataclass(frozen=True)
class LboAssumptions:
    hold_years: int
    revenue0: float
    ebitda_margin0: float
    entry_multiple: float

    revenue_cagr: float
    exit_margin: float

    da_pct_revenue: float
    capex_pct_revenue: float
    nwc_pct_revenue: float
    tax_rate: float

    debt_pct_ev: float
    debt_rate: float
    mandatory_amort_pct: float

    exit_multiple: float
    fee_pct_ev: float = 0.0


@dataclass(frozen=True)
class LboYear:
    year: int
    revenue: float
    ebitda_margin: float
    ebitda: float
    da: float
    ebit: float
    tax: float
    capex: float
    change_in_nwc: float
    beginning_debt: float
    interest: float
    mandatory_amortization: float
    cash_available: float
    sweep: float
    paydown: float
    ending_debt: float


@dataclass(frozen=True)
class LboResult:
    hold_years: int

    entry_ebitda: float
    entry_ev: float
    fees: float
    entry_debt: float
    entry_equity: float

    schedule: List[LboYear]

    exit_ebitda: float
    exit_ev: float
    exit_debt: float
    exit_equity: float

    equity_irr: float
    moic: float
    entry_leverage: float
    exit_leverage: float


def compute_lbo(inputs: LboAssumptions) -> LboResult:
    n = horizon(inputs.hold_years, MIN_HOLD_YEARS, MAX_HOLD_YEARS)

    revenues = project_revenues(inputs.revenue0, inputs.revenue_cagr, n)
    margins = interpolate_margins(inputs.ebitda_margin0, inputs.exit_margin, n)
    d_nwc = nwc_changes(inputs.revenue0, revenues, inputs.nwc_pct_revenue)

    entry_ebitda = inputs.revenue0 * inputs.ebitda_margin0
    entry_ev = entry_ebitda * inputs.entry_multiple
    fees = entry_ev * inputs.fee_pct_ev
    entry_debt = entry_ev * clamp(inputs.debt_pct_ev, 0.0, MAX_DEBT_PCT_EV)
    entry_equity = entry_ev + fees - entry_debt

    amort_pct = clamp(inputs.mandatory_amort_pct, 0.0, MAX_MANDATORY_AMORT_PCT)

    schedule = []
    debt = entry_debt
    for i, revenue in enumerate(revenues):
        row = _sweep_year(
            year=i + 1,
            beginning_debt=debt,
            revenue=revenue,
            margin=margins[i],
            change_in_nwc=d_nwc[i],
            amort_pct=amort_pct,
            inputs=inputs,
        )
        schedule.append(row)
        debt = row.ending_debt

    exit_ebitda = schedule[-1].ebitda
    exit_ev = exit_ebitda * inputs.exit_multiple
    exit_debt = debt
    exit_equity = exit_ev - exit_debt

    equity_irr = solve_irr(
        [CashflowEvent(0, -entry_equity), CashflowEvent(n, exit_equity)],
        guess=IRR_GUESS,
    )

    return LboResult(
        hold_years=n,
        entry_ebitda=entry_ebitda,
        entry_ev=entry_ev,
        fees=fees,
        entry_debt=entry_debt,
        entry_equity=entry_equity,
        schedule=schedule,
        exit_ebitda=exit_ebitda,
        exit_ev=exit_ev,
        exit_debt=exit_debt,
        exit_equity=exit_equity,
        equity_irr=equity_irr,
        moic=_ratio(exit_equity, entry_equity),
        entry_leverage=_ratio(entry_debt, entry_ebitda),
        exit_leverage=_ratio(exit_debt, exit_ebitda),
    )


def _sweep_year(
    *,
    year: int,
    beginning_debt: float,
    revenue: float,
    margin: float,
    change_in_nwc: float,
    amort_pct: float,
    inputs: LboAssumptions,
) -> LboYear:
    ebitda = revenue * margin
    da = revenue * inputs.da_pct_revenue
    ebit = ebitda - da
    tax = loss_safe_tax(ebit, inputs.tax_rate)
    capex = revenue * inputs.capex_pct_revenue

    interest = beginning_debt * inputs.debt_rate
    mandatory = beginning_debt * amort_pct

    cash_available = ebitda - tax - capex - change_in_nwc - interest
    sweep = max(0.0, cash_available - mandatory)
    paydown = clamp(mandatory + sweep, 0.0, beginning_debt)

    return LboYear(
        year=year,
        revenue=revenue,
        ebitda_margin=margin,
        ebitda=ebitda,
        da=da,
        ebit=ebit,
        tax=tax,
        capex=capex,
        change_in_nwc=change_in_nwc,
        beginning_debt=beginning_debt,
        interest=interest,
        mandatory_amortization=mandatory,
        cash_available=cash_available,
        sweep=sweep,
        paydown=paydown,
        ending_debt=beginning_debt - paydown,
    )


def _ratio(numerator: float, denominator: float) -> float:
    return numerator / denominator if denominator != 0 else nan
