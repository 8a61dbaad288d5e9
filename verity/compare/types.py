"""
Comparison data model

Paths into compared values and the differences found along them.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from verity.core.format import format_full, format_value


class DifferenceKind(str, Enum):
    """What went wrong at one path."""

    MISSING = "missing"
    UNEXPECTED = "unexpected"
    MISMATCH = "mismatch"
    TYPE_MISMATCH = "type_mismatch"
    COUNT_MISMATCH = "count_mismatch"
    TOO_DEEP = "too_deep"


_MEMBER = "member"
_INDEX = "index"
_KEY = "key"


@dataclass(frozen=True)
class ComparisonPath:
    """Immutable location inside a compared value.

    Each step returns a new path; ``len(path)`` is the recursion depth.
    """

    segments: tuple[tuple[str, Any], ...] = ()

    def member(self, name: str) -> ComparisonPath:
        return ComparisonPath(self.segments + ((_MEMBER, name),))

    def index(self, position: int) -> ComparisonPath:
        return ComparisonPath(self.segments + ((_INDEX, position),))

    def key(self, key: Any) -> ComparisonPath:
        return ComparisonPath(self.segments + ((_KEY, key),))

    @property
    def is_root(self) -> bool:
        return not self.segments

    def __len__(self) -> int:
        return len(self.segments)

    def __str__(self) -> str:
        parts = []
        for kind, value in self.segments:
            if kind == _MEMBER:
                parts.append(value if not parts else f".{value}")
            elif kind == _INDEX:
                parts.append(f"[{value}]")
            else:
                parts.append(f"[{format_value(value)}]")
        return "".join(parts)


ROOT = ComparisonPath()


@dataclass(frozen=True)
class Difference:
    """One structural difference between actual and expected."""

    path: ComparisonPath
    kind: DifferenceKind
    actual: Any = None
    expected: Any = None

    @property
    def actual_summary(self) -> str:
        return format_value(self.actual)

    @property
    def expected_summary(self) -> str:
        return format_value(self.expected)

    @property
    def location(self) -> str:
        return str(self.path) if not self.path.is_root else "<root>"

    @property
    def message(self) -> str:
        kind = self.kind
        if kind is DifferenceKind.MISSING:
            return f"missing {self.expected_summary}"
        if kind is DifferenceKind.UNEXPECTED:
            return f"unexpected {self.actual_summary}"
        if kind is DifferenceKind.TYPE_MISMATCH:
            return f"{format_full(self.actual)} has a different type than {format_full(self.expected)}"
        if kind is DifferenceKind.COUNT_MISMATCH:
            return f"has {self.actual} elements instead of {self.expected}"
        if kind is DifferenceKind.TOO_DEEP:
            return f"exceeds the maximum recursion depth of {self.expected}"
        return f"{self.actual_summary} is not {self.expected_summary}"

    def __str__(self) -> str:
        return f"{self.location}: {self.message}"
