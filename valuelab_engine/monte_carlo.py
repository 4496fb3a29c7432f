"""
Monte Carlo Simulator
=====================

Geometric Brownian motion sampler producing terminal-value statistics.

Each path starts at ``s0`` and is stepped ``steps`` times over ``years``:

    s <- s * exp((mu - sigma^2 / 2) * dt + sigma * sqrt(dt) * z)

with ``z`` standard normal (Box-Muller). Paths are independent.

The uniform source is pluggable: pass any object with a ``random()`` method
returning floats in [0, 1) (e.g. ``random.Random(42)``) for reproducible runs.
Without one, a freshly seeded ``random.Random()`` is used.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from math import cos, exp, floor, inf, log, pi, sqrt
from typing import List, Optional, Protocol, Sequence

from .errors import InputError
from .numeric import clamp

logger = logging.getLogger(__name__)

DEFAULT_PATHS: int = 2000
MIN_UNIFORM: float = 1e-12
MAX_QUANTILE: float = 0.9999


class UniformSource(Protocol):
    def random(self) -> float: ...


@dataclass(frozen=True)
class MonteCarloSummary:
    mean: float
    p05: float
    p50: float
    p95: float
    paths: int


def standard_normal(rng: UniformSource) -> float:
    """One standard-normal draw via Box-Muller from two uniforms."""
    u1 = rng.random() or MIN_UNIFORM
    u2 = rng.random()
    return sqrt(-2.0 * log(u1)) * cos(2.0 * pi * u2)


def _growth_factor(x: float) -> float:
    # exp overflows past ~709; the path value is then unbounded.
    try:
        return exp(x)
    except OverflowError:
        return inf


def empirical_quantile(sorted_values: Sequence[float], p: float) -> float:
    return sorted_values[int(floor(clamp(p, 0.0, MAX_QUANTILE) * len(sorted_values)))]


def simulate_paths(
    *,
    s0: float,
    mu: float,
    sigma: float,
    years: float,
    steps: int = 1,
    n: int = DEFAULT_PATHS,
    rng: Optional[UniformSource] = None,
) -> List[float]:
    """Terminal value of each of ``n`` paths, in simulation order."""
    if steps < 1:
        raise InputError("steps must be >= 1")
    if n < 1:
        raise InputError("path count must be >= 1")
    if not (years >= 0):
        raise InputError("years must be >= 0")
    if rng is None:
        rng = random.Random()

    dt = years / steps
    drift = (mu - 0.5 * sigma * sigma) * dt
    shock = sigma * sqrt(dt)

    terminal = []
    for _ in range(n):
        s = s0
        for _ in range(steps):
            s = s * _growth_factor(drift + shock * standard_normal(rng))
        terminal.append(s)
    return terminal


def simulate_terminal_values(
    *,
    s0: float,
    mu: float,
    sigma: float,
    years: float,
    steps: int = 1,
    n: int = DEFAULT_PATHS,
    rng: Optional[UniformSource] = None,
    seed: Optional[int] = None,
) -> MonteCarloSummary:
    if rng is None and seed is not None:
        rng = random.Random(seed)

    logger.debug("Monte Carlo: %d paths x %d steps over %.3f years", n, steps, years)
    paths = sorted(simulate_paths(s0=s0, mu=mu, sigma=sigma, years=years, steps=steps, n=n, rng=rng))

    return MonteCarloSummary(
        mean=sum(paths) / len(paths),
        p05=empirical_quantile(paths, 0.05),
        p50=empirical_quantile(paths, 0.50),
        p95=empirical_quantile(paths, 0.95),
        paths=len(paths),
    )
