"""
IRR Solver
==========

Newton-Raphson root finder for the periodic rate that sets the net present
value of a cashflow schedule to zero.

A schedule that has no stable root (no sign change, divergence, or no
convergence inside the iteration cap) yields ``nan`` rather than raising, so
callers can render the rate as unavailable.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from math import isfinite, nan
from typing import Iterable, List, Sequence, Tuple, Union

from .errors import InputError
from .numeric import clamp

logger = logging.getLogger(__name__)

DEFAULT_GUESS: float = 0.20
MAX_ITERATIONS: int = 60
TOLERANCE: float = 1e-8
MIN_DERIVATIVE: float = 1e-12
RATE_FLOOR: float = -0.95
RATE_CEILING: float = 5.0


@dataclass(frozen=True)
class CashflowEvent:
    t: float  # time offset in periods
    amount: float


EventLike = Union[CashflowEvent, Tuple[float, float]]


def normalize_schedule(schedule: Iterable[EventLike]) -> List[CashflowEvent]:
    """Accept ``CashflowEvent`` objects or ``(t, amount)`` pairs; enforce non-decreasing time."""
    events = [e if isinstance(e, CashflowEvent) else CashflowEvent(float(e[0]), float(e[1])) for e in schedule]
    for prev, cur in zip(events, events[1:]):
        if cur.t < prev.t:
            raise InputError("cashflow schedule time offsets must be non-decreasing")
    return events


def npv(schedule: Sequence[CashflowEvent], rate: float) -> float:
    return sum(e.amount / (1.0 + rate) ** e.t for e in schedule)


def _npv_and_derivative(schedule: Sequence[CashflowEvent], rate: float) -> Tuple[float, float]:
    f = 0.0
    df = 0.0
    for e in schedule:
        denom = (1.0 + rate) ** e.t
        f += e.amount / denom
        df += (-e.t * e.amount) / (denom * (1.0 + rate))
    return f, df


def solve_irr(schedule: Iterable[EventLike], guess: float = DEFAULT_GUESS) -> float:
    events = normalize_schedule(schedule)
    if not events:
        return nan

    # Rates at or below -100% have no real discount factor.
    r = clamp(guess, RATE_FLOOR, RATE_CEILING)
    try:
        for _ in range(MAX_ITERATIONS):
            f, df = _npv_and_derivative(events, r)
            if abs(f) < TOLERANCE:
                return r

            if abs(df) < MIN_DERIVATIVE:
                df = MIN_DERIVATIVE if df >= 0 else -MIN_DERIVATIVE
            r = r - f / df
            if not isfinite(r):
                logger.debug("IRR diverged to a non-finite rate")
                return nan
            r = clamp(r, RATE_FLOOR, RATE_CEILING)

        f, _ = _npv_and_derivative(events, r)
    except (ZeroDivisionError, OverflowError):
        logger.debug("IRR evaluation out of float range at rate %.6f", r)
        return nan

    if abs(f) < TOLERANCE:
        return r
    logger.debug("IRR did not converge within %d iterations (last rate %.6f)", MAX_ITERATIONS, r)
    return nan
