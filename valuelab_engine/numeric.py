"""
Scalar helpers shared by the engines.
"""

from __future__ import annotations

from math import floor
from typing import List, Sequence

from .errors import InvalidArgument


def clamp(x: float, lo: float, hi: float) -> float:
    """Bound ``x`` to ``[lo, hi]``. NaN passes through unchanged."""
    if x != x:
        return x
    return max(lo, min(hi, x))


def exponential_smooth(series: Sequence[float], alpha: float) -> List[float]:
    """
    Simple exponential smoothing.

    out[0] = x[0]; out[i] = alpha * x[i] + (1 - alpha) * out[i - 1].
    An empty series smooths to an empty list.
    """
    if not series:
        return []
    if not (0.0 < alpha < 1.0):
        raise InvalidArgument(f"alpha must be in (0, 1), got {alpha}")

    out = [float(series[0])]
    for x in series[1:]:
        out.append(alpha * float(x) + (1.0 - alpha) * out[-1])
    return out


def round_half_up(x: float) -> int:
    """Nearest integer with halves rounded up (2.5 -> 3), unlike the built-in ``round``."""
    return int(floor(x + 0.5))
