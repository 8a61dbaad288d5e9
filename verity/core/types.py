"""Data classes and exceptions for assertion reporting."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


# ---------------------------------------------------------------------------
# Result data classes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SourceLocation:
    """Caller code that issued an assertion."""

    file: str
    line: int
    function: str
    code: str = ""

    def __str__(self) -> str:
        return f"{self.file}:{self.line}"


@dataclass
class Failure:
    """One failed assertion evaluation.

    Structural comparisons fold all their differences into a single parent
    failure; each difference becomes an entry of ``sub_failures``.
    """

    message: str
    actual: Any = None
    expected: Any = None
    sub_failures: list[Failure] | None = None
    source: SourceLocation | None = None
    assertion: str | None = None
    exception_type: type[BaseException] | None = None
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def file(self) -> str | None:
        return self.source.file if self.source else None

    @property
    def line(self) -> int | None:
        return self.source.line if self.source else None

    @property
    def code(self) -> str | None:
        return self.source.code if self.source else None

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class AssertionEvent:
    """Outcome of a single assertion evaluation, passed or failed."""

    passed: bool
    failure: Failure | None = None
    assertion: str | None = None
    source: SourceLocation | None = None
    timestamp: datetime = field(default_factory=datetime.now)

    @classmethod
    def for_failure(cls, failure: Failure) -> AssertionEvent:
        return cls(
            passed=False,
            failure=failure,
            assertion=failure.assertion,
            source=failure.source,
        )

    @property
    def file(self) -> str | None:
        return self.source.file if self.source else None

    @property
    def line(self) -> int | None:
        return self.source.line if self.source else None

    @property
    def message(self) -> str | None:
        return self.failure.message if self.failure else None


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class VerityError(Exception):
    """Base exception for library misuse and configuration problems."""


class UsageError(VerityError):
    """Raised immediately when the library is used incorrectly."""


class ConfigError(UsageError, ValueError):
    """Raised when a configuration value or verity.yaml is invalid."""


class AssertionFailedError(AssertionError):
    """Raised for a failed check when no assertion context buffers it."""

    def __init__(self, message: str, failure: Failure | None = None):
        super().__init__(message)
        self.failure = failure


class MultipleFailuresError(AssertionFailedError):
    """Aggregate of the failures left in an assertion context on dispose."""

    def __init__(self, message: str, errors: list[BaseException]):
        super().__init__(message)
        self.errors = list(errors)

    def __str__(self) -> str:
        lines = [self.args[0]]
        for number, error in enumerate(self.errors, start=1):
            lines.append(f"\n[{number}] {type(error).__name__}: {error}")
        return "\n".join(lines)
