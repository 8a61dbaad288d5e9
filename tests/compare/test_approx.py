"""Tests for compare.approx: tolerance and exact equality rules."""

import math

import numpy as np
import pytest

from verity import set_config
from verity.compare.approx import (
    DEFAULT_TOLERANCE,
    is_bit_identical,
    is_close,
    is_exactly_equal,
    is_floating,
    values_equal,
)


class TestIsClose:
    def test_tolerance_override(self):
        assert is_close(100.1, 100.0, 0.01)

    def test_default_tolerance_rejects(self):
        assert not is_close(100.1, 100.0)

    def test_relative_to_expected(self):
        # 1e-6 * 1e6 = 1.0 allowed
        assert is_close(1_000_000.9, 1_000_000.0)
        assert not is_close(1_000_001.5, 1_000_000.0)

    def test_absolute_floor_near_zero(self):
        assert is_close(1e-7, 0.0)
        assert not is_close(1e-5, 0.0)

    @pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf, 0.0, -0.0, 1.5])
    def test_reflexive(self, value):
        assert is_close(value, value)

    def test_nan_not_close_to_number(self):
        assert not is_close(math.nan, 1.0)

    def test_infinities_differ(self):
        assert not is_close(math.inf, -math.inf)

    def test_uses_configured_tolerance(self):
        set_config(tolerance=0.01)
        assert is_close(100.1, 100.0)

    def test_numpy_scalars(self):
        assert is_close(np.float32(0.1), 0.1)
        assert is_close(np.float64(2.0), np.float64(2.0000001))


class TestIsExactlyEqual:
    def test_signed_zero_differs(self):
        assert not is_exactly_equal(0.0, -0.0)

    def test_same_nan_equal(self):
        nan = math.nan
        assert is_exactly_equal(nan, nan)

    def test_tiny_difference_fails(self):
        assert not is_exactly_equal(0.1 + 0.2, 0.3)

    def test_non_floats_use_eq(self):
        assert is_exactly_equal("a", "a")
        assert is_exactly_equal([1, 2], [1, 2])
        assert not is_exactly_equal(1, 2)

    def test_numpy_array_all(self):
        assert is_exactly_equal(np.array([1, 2]), np.array([1, 2]))
        assert not is_exactly_equal(np.array([1, 2]), np.array([1, 3]))


class TestHelpers:
    def test_is_floating(self):
        assert is_floating(1.0)
        assert is_floating(np.float16(1))
        assert not is_floating(1)
        assert not is_floating(True)

    def test_bit_identical_complex(self):
        assert is_bit_identical(1 + 2j, 1 + 2j)
        assert not is_bit_identical(1 + 2j, 1 - 2j)

    def test_default_tolerance(self):
        assert DEFAULT_TOLERANCE == 1e-6


class TestValuesEqual:
    def test_float_tolerance(self):
        assert values_equal(0.1 + 0.2, 0.3)

    def test_tuple_elementwise(self):
        assert values_equal((1, 0.1 + 0.2), (1, 0.3))
        assert not values_equal((1, 0.3), (2, 0.3))

    def test_tuple_length(self):
        assert not values_equal((1, 2), (1, 2, 3))

    def test_int_vs_float(self):
        assert values_equal(1, 1.0000001)

    def test_strings(self):
        assert values_equal("x", "x")
        assert not values_equal("x", "y")
