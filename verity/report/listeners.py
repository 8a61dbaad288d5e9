"""Listeners notified of every assertion evaluation, passed or failed.

Listeners are fire-and-forget. A listener that raises interrupts the
assertion that notified it; keeping ``on_assertion`` exception-free is the
listener author's responsibility.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable

from rich.console import Console
from rich.text import Text

from verity.core.types import AssertionEvent


class AssertionListener(ABC):
    """Observer of assertion outcomes."""

    @abstractmethod
    def on_assertion(self, event: AssertionEvent) -> None:
        """Called after every assertion evaluation."""


class DelegateListener(AssertionListener):
    """Forward every event to a callback."""

    def __init__(self, callback: Callable[[AssertionEvent], None]):
        self.callback = callback

    def on_assertion(self, event: AssertionEvent) -> None:
        self.callback(event)


class ConsoleListener(AssertionListener):
    """Print ``[PASS]``/``[FAIL]`` lines for each evaluation."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console(highlight=False)

    def on_assertion(self, event: AssertionEvent) -> None:
        status = Text("PASS", style="green") if event.passed else Text("FAIL", style="red")
        location = f" at {event.file}:{event.line}" if event.file is not None else ""
        line = Text.assemble("[", status, f"] {event.assertion or '?'}{location}")
        self.console.print(line)


# ---------------------------------------------------------------------------
# Statistics
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AssertionStats:
    """Pass/fail counters for one assertion name."""

    passed: int = 0
    failed: int = 0

    @property
    def total(self) -> int:
        return self.passed + self.failed

    def record(self, passed: bool) -> AssertionStats:
        if passed:
            return AssertionStats(self.passed + 1, self.failed)
        return AssertionStats(self.passed, self.failed + 1)


class StatisticsListener(AssertionListener):
    """Collect pass/fail counts per assertion name. Thread-safe."""

    def __init__(self):
        self._lock = threading.Lock()
        self._stats: dict[str, AssertionStats] = {}
        self._passed = 0
        self._failed = 0

    @property
    def total(self) -> int:
        with self._lock:
            return self._passed + self._failed

    @property
    def total_passed(self) -> int:
        with self._lock:
            return self._passed

    @property
    def total_failed(self) -> int:
        with self._lock:
            return self._failed

    @property
    def pass_rate(self) -> float:
        """Between 0.0 and 1.0; 1.0 when nothing was evaluated yet."""
        with self._lock:
            total = self._passed + self._failed
            return 1.0 if total == 0 else self._passed / total

    @property
    def per_assertion(self) -> dict[str, AssertionStats]:
        with self._lock:
            return dict(self._stats)

    def on_assertion(self, event: AssertionEvent) -> None:
        key = event.assertion or "unknown"
        with self._lock:
            if event.passed:
                self._passed += 1
            else:
                self._failed += 1
            self._stats[key] = self._stats.get(key, AssertionStats()).record(event.passed)

    def summary(self) -> str:
        """Formatted per-assertion summary, most used first."""
        stats = self.per_assertion
        lines = [
            f"Assertions: {self.total} total, {self.total_passed} passed, "
            f"{self.total_failed} failed ({self.pass_rate:.1%})",
            "",
        ]
        for name, s in sorted(stats.items(), key=lambda item: item[1].total, reverse=True):
            lines.append(f"  {name:<30} {s.passed:>5} passed  {s.failed:>5} failed")
        return "\n".join(lines) + "\n"

    def reset(self) -> None:
        with self._lock:
            self._stats.clear()
            self._passed = 0
            self._failed = 0
