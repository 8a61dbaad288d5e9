"""
Assertion orchestration

Every check ends in :func:`passed` or :func:`failed`. Those functions notify
the configured listener and observer, then either buffer the failure in the
active :class:`~verity.core.context.AssertionContext` or hand it to the
configured adapter.

    Check.that(actual > 0).unless(actual, "is not positive")
    Check.value(items, lambda v: len(v) == 3).yields(len).unless_message("expected three items")
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Generic, TypeVar

from verity.core.context import AssertionContext, active_config
from verity.core.format import ELLIPSIS, NOTHING, actually, single_line, strip_ansi, with_details
from verity.core.frames import find_caller
from verity.core.types import AssertionEvent, Failure

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _notify(config, event: AssertionEvent) -> None:
    if config.listener is not None:
        config.listener.on_assertion(event)
    if config.observer is not None:
        config.observer.on_assertion(event)


def passed(result: T = True) -> T:
    """Record a successful evaluation and return *result*."""
    config = active_config()
    context = AssertionContext.current()
    if context is not None:
        context.add_success()
    if config.listener is not None or config.observer is not None:
        source, name = find_caller()
        _notify(config, AssertionEvent(passed=True, assertion=name, source=source))
    return result


def failed(
    message: str,
    actual: Any = None,
    expected: Any = None,
    *,
    details: list[str] | None = None,
    sub_failures: list[Failure] | None = None,
    exception_type: type[BaseException] | None = None,
) -> None:
    """
    Record a failed evaluation

    Args:
        message: formatted failure text
        actual: value under test
        expected: reference value
        details: extra lines appended to the message, truncated to
            ``max_details``
        sub_failures: nested failures folded into this one; past
            ``max_details`` the list is cut and ends in a ``...`` failure
        exception_type: exception raised by the default adapter instead of
            :class:`AssertionFailedError`

    Returns:
        ``None`` when the failure is buffered or only logged; otherwise the
        adapter decides (the default adapter raises).
    """
    config = active_config()
    source, name = find_caller()

    text = message
    if details:
        text = with_details(text, details, config.max_details)
    if config.append_code_line and source is not None and source.code:
        text = f"{text.rstrip()}\n\nin {source.function} line {source.line}: {source.code}\n"

    if sub_failures is not None and len(sub_failures) > config.max_details:
        sub_failures = [*sub_failures[: config.max_details], Failure(ELLIPSIS)]

    failure = Failure(
        message=text,
        actual=actual,
        expected=expected,
        sub_failures=sub_failures,
        source=source,
        assertion=name,
        exception_type=exception_type,
    )
    _notify(config, AssertionEvent.for_failure(failure))

    context = AssertionContext.current()
    if context is not None:
        context.add_failure(failure)
        return None
    if config.throw_on_failure:
        config.adapter.report_failure(failure)
        return None
    logger.warning("%s", single_line(strip_ansi(failure.message)))
    return None


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------

class Failable(Generic[T]):
    """Outcome of a condition, completed by one of the ``unless`` methods."""

    def __init__(self, condition: bool, result: T = True, exception_type: type[BaseException] | None = None):
        self.condition = bool(condition)
        self.result = result
        self.exception_type = exception_type

    def raising(self, exception_type: type[BaseException]) -> Failable[T]:
        """Tag a failure with a custom exception type."""
        return Failable(self.condition, self.result, exception_type)

    def unless(self, actual: Any, relation: str, expected: Any = NOTHING) -> T | None:
        if self.condition:
            return passed(self.result)
        colorize = active_config().colorize
        message = actually(actual, relation, expected, colorize=colorize)
        return failed(
            message,
            actual,
            None if expected is NOTHING else expected,
            exception_type=self.exception_type,
        )

    def unless_message(self, message: str) -> T | None:
        if self.condition:
            return passed(self.result)
        return failed(message, exception_type=self.exception_type)

    def unless_details(
        self,
        message: str,
        lines: list[str],
        actual: Any = None,
        expected: Any = None,
        sub_failures: list[Failure] | None = None,
    ) -> T | None:
        if self.condition:
            return passed(self.result)
        return failed(
            message,
            actual,
            expected,
            details=lines,
            sub_failures=sub_failures,
            exception_type=self.exception_type,
        )


class Returnable(Generic[T]):
    """A value plus the result of its predicate, evaluated exactly once."""

    def __init__(self, value: T, condition: bool):
        self.value = value
        self.condition = bool(condition)

    def yields(self, fn: Callable[[T], Any]) -> Failable:
        """Carry ``fn(value)`` as the result on success."""
        return Failable(self.condition, fn(self.value) if self.condition else None)

    def unless(self, actual: Any, relation: str, expected: Any = NOTHING):
        return Failable(self.condition, self.value).unless(actual, relation, expected)

    def unless_message(self, message: str):
        return Failable(self.condition, self.value).unless_message(message)


class Check:
    """Entry points for building an assertion."""

    @staticmethod
    def that(condition: bool) -> Failable[bool]:
        return Failable(condition)

    @staticmethod
    def value(value: T, predicate: Callable[[T], bool]) -> Returnable[T]:
        return Returnable(value, predicate(value))
