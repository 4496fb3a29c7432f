"""
JSON rendering of engine results.

The engines report degenerate arithmetic as non-finite floats: an IRR that
does not converge, MOIC or leverage over a zero denominator, Kelly sizing at
zero volatility, a Monte Carlo path that overflows. Strict JSON has no
spelling for those, so they are rendered as ``null`` ("unavailable").
"""

import math
from typing import Any


def sanitize_for_json(obj: Any) -> Any:
    """Copy of ``obj`` with every NaN / +-Infinity float replaced by ``None``.

    Dicts, lists and tuples are walked recursively; tuples come back as lists,
    which is how they serialize anyway.
    """
    if isinstance(obj, float):
        return obj if math.isfinite(obj) else None
    if isinstance(obj, dict):
        return {key: sanitize_for_json(value) for key, value in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [sanitize_for_json(item) for item in obj]
    return obj
