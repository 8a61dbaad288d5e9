"""
Assertion context

Buffers failures for one logical flow of execution and reports them together
when the context is disposed:

    with AssertionContext.begin():
        that(a).is_(1)
        that(b).is_(2)      # both failures are reported on exit

The active context lives in a :class:`contextvars.ContextVar`. asyncio tasks
created inside the scope inherit it; tasks and threads started earlier do not.
"""

from __future__ import annotations

import contextvars
import functools
import logging
import sys
from collections import deque
from typing import Any, Callable

from verity.core.config import Configuration, get_config
from verity.core.types import Failure, UsageError

logger = logging.getLogger(__name__)

_current: contextvars.ContextVar[AssertionContext | None] = contextvars.ContextVar(
    "verity_assertion_context", default=None
)


class AssertionContext:
    """Scoped failure queue with its own configuration clone.

    Use :meth:`begin` to create one; the constructor does not activate it.
    """

    def __init__(self, name: str, config: Configuration):
        self.name = name
        self.config = config
        self._failures: deque[Failure] = deque()
        self._passed = 0
        self._failed = 0
        self._token: contextvars.Token | None = None
        self._closed = False

    # -- lifecycle -----------------------------------------------------------

    @classmethod
    def begin(cls, name: str | None = None) -> AssertionContext:
        """
        Activate a new context for the current flow

        Args:
            name: label used in the aggregate report; defaults to the
                calling function's name

        Raises:
            UsageError: If a context is already active in this flow.
        """
        active = _active()
        if active is not None:
            raise UsageError(
                f"AssertionContext '{active.name}' is already active; "
                "nested contexts are not supported"
            )
        if name is None:
            name = sys._getframe(1).f_code.co_name
        context = cls(name, get_config().clone())
        context._token = _current.set(context)
        logger.debug("assertion context '%s' started", name)
        return context

    def dispose(self) -> None:
        """
        Deactivate and report the failures still queued

        The aggregate message reads ``"{n} of {total} assertion(s) failed in
        '{name}'"`` where ``total`` is the passed count plus the failures still
        queued; failures taken with :meth:`next_failure` count in neither.
        Flows whose context copy still points here see no active context
        once it is disposed.
        """
        if self._closed or self._token is None:
            return
        self._closed = True
        token, self._token = self._token, None
        try:
            _current.reset(token)
        except ValueError:
            # disposed from a different context copy than it was begun in
            _current.set(None)
        logger.debug(
            "assertion context '%s' finished: %d passed, %d failed",
            self.name, self._passed, self._failed,
        )
        if self._failures:
            failures = list(self._failures)
            self._failures.clear()
            total = self._passed + len(failures)
            plural = "" if total == 1 else "s"
            message = f"{len(failures)} of {total} assertion{plural} failed in '{self.name}'"
            self.config.adapter.report_failures(message, failures)

    def __enter__(self) -> AssertionContext:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.dispose()

    # -- ambient access ------------------------------------------------------

    @staticmethod
    def current() -> AssertionContext | None:
        return _active()

    @staticmethod
    def is_active() -> bool:
        return _active() is not None

    @staticmethod
    def run(fn: Callable[..., Any], *args, **kwargs) -> Any:
        """Call *fn* in a copy of the current ``contextvars`` context."""
        return contextvars.copy_context().run(fn, *args, **kwargs)

    @staticmethod
    def bind(fn: Callable[..., Any]) -> Callable[..., Any]:
        """
        Wrap *fn* so it runs in a copy of the context taken now

        Pass the result as a thread target to let the worker report into
        the active context:

            threading.Thread(target=AssertionContext.bind(work)).start()
        """
        return functools.partial(contextvars.copy_context().run, fn)

    # -- counters ------------------------------------------------------------

    @property
    def passed(self) -> int:
        return self._passed

    @property
    def failed(self) -> int:
        return self._failed

    @property
    def total(self) -> int:
        return self._passed + self._failed

    @property
    def ratio(self) -> float:
        """Share of passed assertions; 1.0 when nothing was evaluated."""
        return 1.0 if self.total == 0 else self._passed / self.total

    @property
    def pending(self) -> int:
        return len(self._failures)

    def add_success(self) -> None:
        self._passed += 1

    def add_failure(self, failure: Failure) -> None:
        self._failed += 1
        self._failures.append(failure)

    # -- dequeue -------------------------------------------------------------

    def next_failure(self) -> Failure:
        """
        Remove and return the oldest queued failure

        Raises:
            UsageError: If no failure is queued.
        """
        if not self._failures:
            raise UsageError(f"No failures queued in assertion context '{self.name}'")
        return self._failures.popleft()

    def take_failures(self, count: int) -> list[Failure]:
        """Dequeue *count* failures, oldest first."""
        return [self.next_failure() for _ in range(count)]

    def __repr__(self) -> str:
        return (
            f"AssertionContext(name={self.name!r}, passed={self._passed}, "
            f"failed={self._failed}, pending={len(self._failures)})"
        )


def active_config() -> Configuration:
    """Configuration of the active context, or the global one."""
    context = _active()
    return context.config if context is not None else get_config()


def _active() -> AssertionContext | None:
    context = _current.get()
    if context is None or context._closed:
        return None
    return context
