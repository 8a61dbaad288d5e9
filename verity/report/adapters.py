"""Reporting adapters: hand failures to the host test framework."""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable

from verity.core.format import single_line, strip_ansi
from verity.core.types import AssertionFailedError, Failure, MultipleFailuresError
from verity.report.render import failure_to_markdown

logger = logging.getLogger(__name__)

DEFAULT_MARKDOWN_FILE = "FailureReport.md"


class ReportingAdapter(ABC):
    """Receives failures that are not buffered by an assertion context.

    Implementations may raise; raising is how a failure becomes visible to
    the test runner.
    """

    @abstractmethod
    def report_failure(self, failure: Failure) -> None:
        """Report a single failed assertion."""

    @abstractmethod
    def report_failures(self, message: str, failures: list[Failure]) -> None:
        """Report the failures collected by an assertion context."""


def create_error(failure: Failure) -> BaseException:
    """Build the exception for *failure*, honouring a tagged exception type."""
    if failure.exception_type is not None:
        return failure.exception_type(failure.message)
    return AssertionFailedError(failure.message, failure)


class DefaultAdapter(ReportingAdapter):
    """Raise :class:`AssertionFailedError` (or the failure's tagged type)."""

    def report_failure(self, failure: Failure) -> None:
        raise create_error(failure)

    def report_failures(self, message: str, failures: list[Failure]) -> None:
        raise MultipleFailuresError(message, [create_error(f) for f in failures])


class CustomExceptionAdapter(ReportingAdapter):
    """Raise whatever *factory* builds from a failure."""

    def __init__(self, factory: Callable[[Failure], BaseException]):
        self.factory = factory

    def report_failure(self, failure: Failure) -> None:
        raise self.factory(failure)

    def report_failures(self, message: str, failures: list[Failure]) -> None:
        raise MultipleFailuresError(message, [self.factory(f) for f in failures])


class ConsoleAdapter(ReportingAdapter):
    """Log one line per failure; never raises."""

    def report_failure(self, failure: Failure) -> None:
        logger.error("%s", single_line(strip_ansi(failure.message)))

    def report_failures(self, message: str, failures: list[Failure]) -> None:
        logger.error("%s", message)
        for failure in failures:
            self.report_failure(failure)


class MarkdownAdapter(ReportingAdapter):
    """Append a markdown report per failure; never raises.

    The report file is recreated when the adapter is constructed.
    """

    def __init__(self, path: str | Path = DEFAULT_MARKDOWN_FILE):
        self.path = Path(path)
        self._lock = threading.Lock()
        self.path.unlink(missing_ok=True)

    def report_failure(self, failure: Failure) -> None:
        text = failure_to_markdown(failure)
        with self._lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "a", encoding="utf-8") as fh:
                fh.write(text)

    def report_failures(self, message: str, failures: list[Failure]) -> None:
        for failure in failures:
            self.report_failure(failure)
