"""
Tests for the scalar helpers: clamp, exponential smoothing, rounding.
"""

import math

import pytest

from valuelab_engine import InvalidArgument, clamp, exponential_smooth
from valuelab_engine.numeric import round_half_up


def test_clamp_bounds():
    assert clamp(5.0, 0.0, 1.0) == 1.0
    assert clamp(-5.0, 0.0, 1.0) == 0.0
    assert clamp(0.3, 0.0, 1.0) == 0.3


def test_clamp_propagates_nan():
    assert math.isnan(clamp(float("nan"), 0.0, 2.0))


def test_exponential_smooth():
    assert exponential_smooth([1.0, 2.0, 3.0], 0.5) == [1.0, 1.5, 2.25]


def test_exponential_smooth_keeps_length_and_first_element():
    series = [10.0, 12.0, 9.0, 15.0, 11.0]
    out = exponential_smooth(series, 0.35)
    assert len(out) == len(series)
    assert out[0] == series[0]


def test_exponential_smooth_empty_is_identity():
    assert exponential_smooth([], 0.5) == []
    # Empty input is accepted even with an out-of-range alpha.
    assert exponential_smooth([], 2.0) == []


@pytest.mark.parametrize("alpha", [0.0, 1.0, -0.1, 1.5])
def test_exponential_smooth_rejects_alpha(alpha):
    with pytest.raises(InvalidArgument):
        exponential_smooth([1.0, 2.0], alpha)


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(0.5) == 1
    assert round_half_up(2.4) == 2
