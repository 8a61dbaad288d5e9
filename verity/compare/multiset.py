"""
Multiset matching

Unordered comparison of two collections with multiplicity. Each element of
the left side counts +1, each element of the right side -1; the signs of the
resulting histogram decide equivalence, containment and membership.
"""

from __future__ import annotations

import logging
from collections.abc import Hashable, Iterable, Mapping
from typing import Any, Callable

from .approx import is_floating, values_equal

logger = logging.getLogger(__name__)

Exclude = Callable[[Any], bool]


def _is_tolerant(value: object) -> bool:
    """True when equality of *value* depends on float tolerance."""
    if is_floating(value) or isinstance(value, complex):
        return True
    if isinstance(value, (tuple, list)):
        return any(_is_tolerant(v) for v in value)
    return False


def _is_hashable(value: object) -> bool:
    if not isinstance(value, Hashable):
        return False
    try:
        hash(value)
    except TypeError:
        return False
    return True


class Histogram:
    """Element counts with an exact-hash fast path and a linear tolerant bucket."""

    def __init__(self, epsilon: float | None = None):
        self.epsilon = epsilon
        self._exact: dict[Any, list] = {}
        self._linear: list[list] = []
        self._order: list[list] = []

    def add(self, element: Any, delta: int) -> None:
        entry = self._find(element)
        if entry is None:
            entry = [element, 0]
            self._order.append(entry)
            if _is_hashable(element) and not _is_tolerant(element):
                self._exact[element] = entry
            else:
                self._linear.append(entry)
        entry[1] += delta

    def _find(self, element: Any) -> list | None:
        fast = _is_hashable(element) and not _is_tolerant(element)
        if fast and element in self._exact:
            return self._exact[element]
        for entry in self._linear:
            if values_equal(element, entry[0], self.epsilon):
                return entry
        if not fast:
            for entry in self._exact.values():
                if values_equal(element, entry[0], self.epsilon):
                    return entry
        return None

    def counts(self) -> list[tuple[Any, int]]:
        """Non-zero counts in first-seen order."""
        return [(element, count) for element, count in self._order if count != 0]


def _elements(collection: Iterable, exclude: Exclude | None) -> Iterable:
    if isinstance(collection, Mapping):
        for key, value in collection.items():
            if exclude is None or not exclude(key):
                yield key, value
        return
    for element in collection:
        if exclude is None or not exclude(element):
            yield element


def count_diff(
    left: Iterable,
    right: Iterable,
    exclude: Exclude | None = None,
    epsilon: float | None = None,
) -> list[tuple[Any, int]]:
    """
    Histogram difference of two collections

    Args:
        left: first collection (mappings contribute ``(key, value)`` items)
        right: second collection
        exclude: predicate skipping elements (keys for mappings)
        epsilon: float tolerance for element equality

    Returns:
        ``(element, count)`` pairs with a non-zero count; positive counts
        are surplus on the left side, negative ones on the right
    """
    histogram = Histogram(epsilon)
    for element in _elements(left, exclude):
        histogram.add(element, 1)
    for element in _elements(right, exclude):
        histogram.add(element, -1)
    diff = histogram.counts()
    logger.debug("multiset diff: %d unmatched element(s)", len(diff))
    return diff


def is_equivalent(left, right, exclude: Exclude | None = None, epsilon: float | None = None) -> bool:
    """Same elements with the same multiplicity, in any order."""
    return not count_diff(left, right, exclude, epsilon)


def is_containing(left, right, exclude: Exclude | None = None, epsilon: float | None = None) -> bool:
    """*left* holds every element of *right* at least as often."""
    return all(count >= 0 for _, count in count_diff(left, right, exclude, epsilon))


def is_in(left, right, exclude: Exclude | None = None, epsilon: float | None = None) -> bool:
    """Every element of *left* occurs in *right* at least as often."""
    return all(count <= 0 for _, count in count_diff(left, right, exclude, epsilon))
