"""
Operating forecast building blocks shared by the DCF and LBO engines.

Year indices run 1..N; year 0 is the base year.
"""

from __future__ import annotations

from typing import List, Sequence

from .numeric import clamp, round_half_up


def horizon(years: float, lo: int, hi: int) -> int:
    return int(clamp(round_half_up(years), lo, hi))


def project_revenues(revenue0: float, growth: float, n: int) -> List[float]:
    """Constant compounding: revenue_t = revenue0 * (1 + growth)^t for t = 1..n."""
    return [revenue0 * (1.0 + growth) ** t for t in range(1, n + 1)]


def interpolate_margins(margin0: float, margin_terminal: float, n: int) -> List[float]:
    """Linear path from the base-year margin to the terminal margin, weight t/N (N=1 -> terminal)."""
    margins = []
    for t in range(1, n + 1):
        w = 1.0 if n == 1 else t / n
        margins.append(margin0 + (margin_terminal - margin0) * w)
    return margins


def loss_safe_tax(ebit: float, tax_rate: float) -> float:
    # Losses are never tax-credited.
    return max(0.0, ebit) * tax_rate


def nwc_changes(revenue0: float, revenues: Sequence[float], nwc_pct: float) -> List[float]:
    """Year-over-year change in the working-capital level (revenue * pct), base level from year 0."""
    levels = [revenue0 * nwc_pct] + [r * nwc_pct for r in revenues]
    return [levels[i + 1] - levels[i] for i in range(len(revenues))]
