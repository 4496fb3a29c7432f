"""
Engine error types.

Only out-of-domain input is an error. Numerically degenerate results
(zero volatility, zero entry EBITDA, a diverging IRR) are reported as
non-finite floats instead.
"""

from __future__ import annotations

from typing import Iterable, List


class InputError(ValueError):
    pass


class InvalidArgument(InputError):
    pass


class ValidationError(InputError):
    """Assumptions rejected before any computation. Carries every violated rule."""

    def __init__(self, messages: Iterable[str]):
        self.messages: List[str] = list(messages)
        super().__init__("; ".join(self.messages))


class TerminalValueError(InputError):
    """Gordon growth terminal value requested with WACC <= terminal growth."""

    def __init__(self, wacc: float, growth: float):
        self.wacc = wacc
        self.growth = growth
        super().__init__("Invalid terminal: WACC must be > terminal growth (g) for Gordon.")
