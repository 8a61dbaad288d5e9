"""
Approximate equality

Floating values are close when ``|actual - expected| <= eps * max(1, |expected|)``.
The absolute floor of 1 keeps values near zero comparable.
"""

from __future__ import annotations

import math
import struct
from numbers import Number

import numpy as np

DEFAULT_TOLERANCE = 1e-6


def is_floating(value: object) -> bool:
    """True for Python floats and numpy floating scalars."""
    return isinstance(value, (float, np.floating)) and not isinstance(value, bool)


def _bits(value: float) -> bytes:
    return struct.pack("<d", float(value))


def is_bit_identical(actual: object, expected: object) -> bool:
    """Compare two floating values by their IEEE-754 double bit pattern."""
    if isinstance(actual, complex) or isinstance(expected, complex):
        a, e = complex(actual), complex(expected)
        return _bits(a.real) == _bits(e.real) and _bits(a.imag) == _bits(e.imag)
    return _bits(actual) == _bits(expected)


def is_close(actual: object, expected: object, epsilon: float | None = None) -> bool:
    """
    Approximate equality of two numbers

    Args:
        actual: value under test
        expected: reference value
        epsilon: relative tolerance; defaults to the active configuration's

    Returns:
        True when the operands are bit-identical or within tolerance
    """
    if epsilon is None:
        from verity.core.context import active_config

        epsilon = active_config().tolerance
    if is_bit_identical(actual, expected):
        return True
    diff = abs(complex(actual) - complex(expected))
    if math.isnan(diff) or math.isinf(diff):
        return False
    return diff <= epsilon * max(1.0, abs(expected))


def is_exactly_equal(actual: object, expected: object) -> bool:
    """Equality with no tolerance: floats compare by bit pattern, the rest by ``==``."""
    if is_floating(actual) and is_floating(expected):
        return is_bit_identical(actual, expected)
    if isinstance(actual, complex) and isinstance(expected, complex):
        return is_bit_identical(actual, expected)
    result = actual == expected
    if isinstance(result, np.ndarray):
        return bool(result.all())
    return bool(result)


def values_equal(actual: object, expected: object, epsilon: float | None = None) -> bool:
    """
    Scalar value equality used for multiset elements

    Floats use :func:`is_close`; tuples and lists are compared elementwise with
    the same rule so ``(1, 0.1 + 0.2)`` matches ``(1, 0.3)``.
    """
    if is_floating(actual) and is_floating(expected):
        return is_close(actual, expected, epsilon)
    if (
        isinstance(actual, (tuple, list))
        and isinstance(expected, (tuple, list))
        and type(actual) is type(expected)
    ):
        return len(actual) == len(expected) and all(
            values_equal(a, e, epsilon) for a, e in zip(actual, expected)
        )
    if isinstance(actual, Number) and isinstance(expected, Number) and (
        is_floating(actual) or is_floating(expected)
    ):
        return is_close(actual, expected, epsilon)
    return is_exactly_equal(actual, expected)
