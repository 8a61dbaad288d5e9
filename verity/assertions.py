"""
Fluent assertions

    from verity import that

    that(result).is_(42)
    that(items).is_equivalent_to([3, 1, 2])
    that(order).is_matching(expected_order)
    error = that(lambda: parse("")).is_throwing(ValueError, match="empty")

Every method ends in :func:`~verity.core.assertion.passed` or
:func:`~verity.core.assertion.failed`; with the default configuration a
failure raises :class:`~verity.core.types.AssertionFailedError`, inside an
:class:`~verity.core.context.AssertionContext` it is queued instead.
"""

from __future__ import annotations

import asyncio
import contextvars
import inspect
import os
import re
import threading
from collections.abc import Iterable, Mapping
from datetime import timedelta
from pathlib import Path
from typing import Any, Callable

from verity.compare import multiset
from verity.compare.approx import is_close, is_exactly_equal, values_equal
from verity.compare.classify import ValueKind, classify
from verity.compare.json_compare import json_differences, save_snapshot, snapshot_differences
from verity.compare.structural import differences
from verity.compare.types import Difference
from verity.core.assertion import Check, passed
from verity.core.context import active_config
from verity.core.format import NOTHING, actually, format_value
from verity.core.types import Failure


def _is_collection(value: object) -> bool:
    return isinstance(value, Iterable) and not isinstance(value, (str, bytes, bytearray, Mapping))


def _unwrap(expected: tuple):
    """``f(1, 2)`` and ``f([1, 2])`` both mean the elements 1 and 2."""
    if len(expected) == 1 and isinstance(expected[0], Mapping):
        return expected[0]
    if len(expected) == 1 and _is_collection(expected[0]):
        return list(expected[0])
    return list(expected)


def _fail_with_differences(actual, relation: str, expected, diffs: list[Difference]):
    colorize = active_config().colorize
    if len(diffs) == 1 and diffs[0].path.is_root:
        return Check.that(False).unless(actual, relation, expected)
    lines = [str(d) for d in diffs]
    subs = [Failure(message=str(d), actual=d.actual, expected=d.expected) for d in diffs]
    return Check.that(False).unless_details(
        actually(actual, relation, expected, colorize=colorize),
        lines,
        actual,
        expected,
        sub_failures=subs,
    )


def _unmatched_lines(counts: list[tuple[Any, int]]) -> list[str]:
    lines = []
    for element, count in counts:
        side = "surplus" if count > 0 else "missing"
        lines.append(f"{side} {format_value(element)} (x{abs(count)})")
    return lines


class Subject:
    """Fluent assertions about one value; create it with :func:`that`."""

    def __init__(self, actual: Any):
        self.actual = actual

    def __repr__(self) -> str:
        return f"that({format_value(self.actual)})"

    # -- equality ------------------------------------------------------------

    def is_(self, *expected):
        """
        Structural equality, floats within tolerance

        Several arguments, or a single collection argument, are compared
        element by element against a collection actual.
        """
        actual = self.actual
        if classify(actual) is ValueKind.SEQUENCE:
            if len(expected) == 1 and classify(expected[0]) is ValueKind.SEQUENCE:
                target = list(expected[0])
            else:
                target = list(expected)
            actual = list(actual)
        elif len(expected) == 1:
            target = expected[0]
        elif not expected:
            target = None
        else:
            target = list(expected)
        diffs = differences(actual, target)
        if not diffs:
            return passed()
        return _fail_with_differences(actual, "is not", target, diffs)

    def is_exactly(self, expected):
        """Equality without tolerance; floats compare bit for bit."""
        return Check.that(is_exactly_equal(self.actual, expected)).unless(self.actual, "is not", expected)

    def is_not(self, expected):
        return Check.that(not is_exactly_equal(self.actual, expected)).unless(self.actual, "is", expected)

    def is_same_as(self, expected):
        return Check.that(self.actual is expected).unless(self.actual, "is not the same as", expected)

    def is_approximately(self, expected, epsilon: float | None = None):
        return Check.that(is_close(self.actual, expected, epsilon)).unless(
            self.actual, "is not approximately", expected
        )

    def is_matching(self, expected):
        """Structural diff with one sub-failure per difference."""
        diffs = differences(self.actual, expected)
        if not diffs:
            return passed()
        return _fail_with_differences(self.actual, "is not matching", expected, diffs)

    def is_matching_json(self, expected_json: str):
        """Both sides are JSON texts; scalars must match textually."""
        diffs = json_differences(self.actual, expected_json)
        if not diffs:
            return passed()
        return _fail_with_differences(self.actual, "is not matching", expected_json, diffs)

    def is_matching_snapshot(self, path: str | Path, update: bool = False):
        """
        Compare the canonical JSON of the actual value with a stored snapshot

        A missing snapshot file is created and the check passes; ``update``
        rewrites it unconditionally.
        """
        path = Path(path)
        if update or not path.exists():
            save_snapshot(self.actual, path)
            return passed()
        diffs = snapshot_differences(self.actual, path)
        if not diffs:
            return passed()
        return _fail_with_differences(self.actual, "is not matching snapshot", str(path), diffs)

    # -- collections ---------------------------------------------------------

    def is_equivalent_to(self, expected, exclude: Callable[[Any], bool] | None = None):
        """
        Same elements in any order; strings compare case-insensitively

        Args:
            expected: collection to match
            exclude: skip elements (keys for mappings) for which this is true
        """
        if isinstance(self.actual, str) and isinstance(expected, str):
            return Check.that(self.actual.lower() == expected.lower()).unless(
                self.actual, "is not equivalent to", expected
            )
        counts = multiset.count_diff(self.actual, expected, exclude, active_config().tolerance)
        return Check.that(not counts).unless_details(
            actually(self.actual, "is not equivalent to", expected, colorize=active_config().colorize),
            _unmatched_lines(counts),
            self.actual,
            expected,
        )

    def is_containing(self, *expected):
        """Substring for strings; multiset containment for collections."""
        if isinstance(self.actual, str):
            target = expected[0] if len(expected) == 1 else "".join(expected)
            return Check.that(target in self.actual).unless(self.actual, "is not containing", target)
        target = _unwrap(expected)
        counts = multiset.count_diff(self.actual, target, None, active_config().tolerance)
        return Check.that(all(c >= 0 for _, c in counts)).unless(self.actual, "is not containing", target)

    def is_in(self, *expected):
        """Every element of the actual collection occurs in *expected*.

        A non-collection actual is checked for membership.
        """
        target = _unwrap(expected)
        if not _is_collection(self.actual) and not isinstance(self.actual, Mapping):
            found = any(values_equal(self.actual, e, active_config().tolerance) for e in target)
            return Check.that(found).unless(self.actual, "is not in", target)
        counts = multiset.count_diff(self.actual, target, None, active_config().tolerance)
        return Check.that(all(c <= 0 for _, c in counts)).unless(self.actual, "is not in", target)

    def is_deeply_equivalent_to(self, expected):
        """Same elements in any order, elements compared structurally."""
        remaining = list(expected)
        unmatched = []
        for element in self.actual:
            for position, candidate in enumerate(remaining):
                if not differences(element, candidate):
                    del remaining[position]
                    break
            else:
                unmatched.append(element)
        ok = not unmatched and not remaining
        lines = [f"surplus {format_value(e)}" for e in unmatched]
        lines += [f"missing {format_value(e)}" for e in remaining]
        return Check.that(ok).unless_details(
            actually(self.actual, "is not equivalent to", expected, colorize=active_config().colorize),
            lines,
            self.actual,
            expected,
        )

    def is_empty(self):
        return Check.that(len(self.actual) == 0).unless(self.actual, "is not empty")

    def is_not_empty(self):
        return Check.that(len(self.actual) > 0).unless(self.actual, "is empty")

    def is_unique(self):
        seen = []
        duplicate = NOTHING
        for element in self.actual:
            if any(is_exactly_equal(element, s) for s in seen):
                duplicate = element
                break
            seen.append(element)
        if duplicate is NOTHING:
            return passed()
        return Check.that(False).unless(self.actual, "is containing a duplicate", duplicate)

    def is_ordered(self, key: Callable[[Any], Any] | None = None):
        """Non-decreasing order, optionally by *key*."""
        values = [key(v) if key else v for v in self.actual]
        ok = all(a <= b for a, b in zip(values, values[1:]))
        return Check.that(ok).unless(self.actual, "is not ordered")

    # -- truth and identity --------------------------------------------------

    def is_true(self):
        return Check.that(self.actual is True).unless(self.actual, "is not", True)

    def is_false(self):
        return Check.that(self.actual is False).unless(self.actual, "is not", False)

    def is_none(self):
        return Check.that(self.actual is None).unless(self.actual, "is not", None)

    def is_not_none(self):
        return Check.that(self.actual is not None).unless(self.actual, "is null")

    def is_instance_of(self, cls: type):
        """Returns the actual value on success."""
        return Check.value(self.actual, lambda v: isinstance(v, cls)).unless(
            self.actual, "is not an instance of", cls
        )

    def is_not_instance_of(self, cls: type):
        return Check.that(not isinstance(self.actual, cls)).unless(self.actual, "is an instance of", cls)

    def is_satisfying(self, predicate: Callable[[Any], bool]):
        return Check.that(predicate(self.actual)).unless(self.actual, "is not satisfying", predicate)

    # -- comparisons ---------------------------------------------------------

    def is_greater_than(self, other):
        return Check.that(self.actual > other).unless(self.actual, "is not greater than", other)

    def is_smaller_than(self, other):
        return Check.that(self.actual < other).unless(self.actual, "is not smaller than", other)

    def is_at_least(self, other):
        return Check.that(self.actual >= other).unless(self.actual, "is smaller than", other)

    def is_at_most(self, other):
        return Check.that(self.actual <= other).unless(self.actual, "is greater than", other)

    def is_positive(self):
        return self.is_greater_than(0)

    def is_negative(self):
        return self.is_smaller_than(0)

    def is_between(self, low, high):
        """Exclusive bounds: ``low < actual < high``."""
        return Check.that(low < self.actual < high).unless(
            self.actual, f"is not between {format_value(low)} and {format_value(high)}"
        )

    def is_not_between(self, low, high):
        """Complement of :meth:`is_between`: ``actual <= low or actual >= high``."""
        return Check.that(self.actual <= low or self.actual >= high).unless(
            self.actual, f"is between {format_value(low)} and {format_value(high)}"
        )

    def is_in_range(self, low, high):
        """Inclusive bounds: ``low <= actual <= high``."""
        return Check.that(low <= self.actual <= high).unless(
            self.actual, f"is not in range of {format_value(low)} and {format_value(high)}"
        )

    def is_out_of_range(self, low, high):
        return Check.that(self.actual < low or self.actual > high).unless(
            self.actual, f"is in range of {format_value(low)} and {format_value(high)}"
        )

    # -- strings -------------------------------------------------------------

    def is_starting_with(self, prefix: str):
        return Check.that(self.actual.startswith(prefix)).unless(self.actual, "is not starting with", prefix)

    def is_ending_with(self, suffix: str):
        return Check.that(self.actual.endswith(suffix)).unless(self.actual, "is not ending with", suffix)

    def is_blank(self):
        return Check.that(self.actual is None or not self.actual.strip()).unless(self.actual, "is not blank")

    def is_not_blank(self):
        return Check.that(self.actual is not None and bool(self.actual.strip())).unless(self.actual, "is blank")

    def is_matching_pattern(self, pattern: str):
        """Regex search; returns the match groups on success."""
        return Check.value(re.search(pattern, self.actual), lambda m: m is not None).yields(
            lambda m: m.groups()
        ).unless(self.actual, "is not matching", pattern)

    def is_not_matching_pattern(self, pattern: str):
        return Check.that(re.search(pattern, self.actual) is None).unless(self.actual, "is matching", pattern)

    # -- files ---------------------------------------------------------------

    def is_existing(self):
        return Check.that(os.path.exists(self.actual)).unless(self.actual, "does not exist")

    def is_file(self):
        return Check.that(os.path.isfile(self.actual)).unless(self.actual, "is not a file")

    def is_directory(self):
        return Check.that(os.path.isdir(self.actual)).unless(self.actual, "is not a directory")

    # -- callables -----------------------------------------------------------

    def _call(self):
        result = self.actual()
        if inspect.isawaitable(result):
            return asyncio.run(_await(result))
        return result

    def is_throwing(self, exception_type: type[BaseException] = Exception, match: str | None = None):
        """
        Call the actual callable (or coroutine function) and expect it to raise

        Args:
            exception_type: expected exception class
            match: regular expression searched in ``str(exception)``

        Returns:
            the raised exception on success
        """
        try:
            self._call()
        except BaseException as exc:  # pylint: disable=broad-except
            if not isinstance(exc, (Exception, exception_type)):
                raise
            if not isinstance(exc, exception_type):
                return Check.that(False).unless(exc, "is not an instance of", exception_type)
            if match is not None and re.search(match, str(exc)) is None:
                return Check.that(False).unless(str(exc), "is not matching", match)
            return passed(exc)
        return Check.that(False).unless(exception_type, "was not thrown")

    def is_not_throwing(self, exception_type: type[BaseException] = Exception):
        try:
            self._call()
        except exception_type as exc:
            return Check.that(False).unless(exc, "was thrown")
        return passed()

    def is_completing_within(self, seconds: float):
        """
        Run the action on a daemon thread and wait at most *seconds*

        A timed-out action keeps running in the background. An exception
        raised by an action that finished in time propagates.
        """
        outcome: dict[str, BaseException] = {}

        def target():
            try:
                self._call()
            except BaseException as exc:  # pylint: disable=broad-except
                outcome["error"] = exc

        worker = threading.Thread(
            target=contextvars.copy_context().run, args=(target,), daemon=True
        )
        worker.start()
        worker.join(seconds)
        if worker.is_alive():
            return Check.that(False).unless(
                self.actual, "is not completing within", timedelta(seconds=seconds)
            )
        if "error" in outcome:
            raise outcome["error"]
        return passed()


async def _await(awaitable):
    return await awaitable


def that(actual: Any) -> Subject:
    """Start a fluent assertion about *actual*."""
    return Subject(actual)
