"""
Structural comparison

Recursive, cycle-safe diff of arbitrary Python values. Mismatches are
returned as :class:`Difference` data; comparison never raises for them.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from .approx import is_close, is_exactly_equal
from .classify import ValueKind, classify, describe, type_family
from .types import ROOT, ComparisonPath, Difference, DifferenceKind

logger = logging.getLogger(__name__)


class StructuralComparator:
    """
    Ordered structural diff between an actual and an expected value

    Sequences are compared in order; unordered comparison is the job of
    :mod:`verity.compare.multiset`. Each call to :meth:`compare` uses its own
    visited set.

    Args:
        max_depth: containers deeper than this yield one ``TOO_DEEP``
            difference; defaults to the active configuration
        tolerance: float tolerance; defaults to the active configuration
    """

    def __init__(self, max_depth: int | None = None, tolerance: float | None = None):
        if max_depth is None or tolerance is None:
            from verity.core.context import active_config

            config = active_config()
            max_depth = config.max_recursion_depth if max_depth is None else max_depth
            tolerance = config.tolerance if tolerance is None else tolerance
        self.max_depth = max_depth
        self.tolerance = tolerance

    def compare(self, actual: object, expected: object) -> list[Difference]:
        found: list[Difference] = []
        self._compare(actual, expected, ROOT, {}, found)
        if found:
            logger.debug("structural compare: %d difference(s)", len(found))
        return found

    def _compare(
        self,
        actual: object,
        expected: object,
        path: ComparisonPath,
        visited: dict[tuple[int, int], tuple],
        found: list[Difference],
    ) -> None:
        if actual is None and expected is None:
            return
        if actual is None or expected is None:
            found.append(Difference(path, DifferenceKind.MISMATCH, actual, expected))
            return

        kind_a, kind_e = classify(actual), classify(expected)
        simple = (ValueKind.SIMPLE, ValueKind.FLOATING)
        if kind_a in simple and kind_e in simple:
            self._compare_simple(actual, expected, path, kind_a, kind_e, found)
            return
        if kind_a is not kind_e:
            found.append(Difference(path, DifferenceKind.TYPE_MISMATCH, actual, expected))
            return

        if len(path) > self.max_depth:
            found.append(Difference(path, DifferenceKind.TOO_DEEP, None, self.max_depth))
            return
        pair = (id(actual), id(expected))
        if pair in visited:
            return
        visited[pair] = (actual, expected)

        if kind_a is ValueKind.MAPPING:
            self._compare_mappings(actual, expected, path, visited, found)
        elif kind_a is ValueKind.SEQUENCE:
            self._compare_sequences(actual, expected, path, visited, found)
        else:
            self._compare_composites(actual, expected, path, visited, found)

    def _compare_simple(self, actual, expected, path, kind_a, kind_e, found) -> None:
        if not path.is_root and type_family(actual) is not type_family(expected):
            found.append(Difference(path, DifferenceKind.TYPE_MISMATCH, actual, expected))
            return
        if kind_a is ValueKind.FLOATING and kind_e is ValueKind.FLOATING:
            equal = is_close(actual, expected, self.tolerance)
        else:
            equal = is_exactly_equal(actual, expected)
        if not equal:
            found.append(Difference(path, DifferenceKind.MISMATCH, actual, expected))

    def _compare_mappings(
        self, actual: Mapping, expected: Mapping, path, visited, found
    ) -> None:
        for key, value in actual.items():
            if key in expected:
                self._compare(value, expected[key], path.key(key), visited, found)
            else:
                found.append(Difference(path.key(key), DifferenceKind.UNEXPECTED, value, None))
        for key, value in expected.items():
            if key not in actual:
                found.append(Difference(path.key(key), DifferenceKind.MISSING, None, value))

    def _compare_sequences(self, actual, expected, path, visited, found) -> None:
        left, right = list(actual), list(expected)
        if len(left) != len(right):
            found.append(Difference(path, DifferenceKind.COUNT_MISMATCH, len(left), len(right)))
            return
        for position, (a, e) in enumerate(zip(left, right)):
            self._compare(a, e, path.index(position), visited, found)

    def _compare_composites(self, actual, expected, path, visited, found) -> None:
        members_a, members_e = describe(actual), describe(expected)
        if not members_a and not members_e:
            if not is_exactly_equal(actual, expected):
                found.append(Difference(path, DifferenceKind.MISMATCH, actual, expected))
            return
        for name, value in members_a.items():
            if name in members_e:
                self._compare(value, members_e[name], path.member(name), visited, found)
            else:
                found.append(Difference(path.member(name), DifferenceKind.UNEXPECTED, value, None))
        for name, value in members_e.items():
            if name not in members_a:
                found.append(Difference(path.member(name), DifferenceKind.MISSING, None, value))


def differences(
    actual: object,
    expected: object,
    *,
    max_depth: int | None = None,
    tolerance: float | None = None,
) -> list[Difference]:
    """Ordered list of structural differences; empty when the values are equivalent."""
    return StructuralComparator(max_depth, tolerance).compare(actual, expected)


def is_equivalent(actual: object, expected: object, **options) -> bool:
    return not differences(actual, expected, **options)
