"""Failure observers that persist failed assertions as they happen."""

from __future__ import annotations

import json
import logging
import threading
from abc import abstractmethod
from pathlib import Path

from verity.core.format import single_line, strip_ansi
from verity.core.types import AssertionEvent, Failure
from verity.report.listeners import AssertionListener
from verity.report.render import failure_to_markdown, failure_to_record

logger = logging.getLogger(__name__)

DEFAULT_JSON_FILE = "FailureReport.json"
DEFAULT_MARKDOWN_FILE = "FailureReport.md"


class FailureObserver(AssertionListener):
    """Listener that only cares about failed evaluations."""

    def on_assertion(self, event: AssertionEvent) -> None:
        if not event.passed and event.failure is not None:
            self.on_failure(event.failure)

    @abstractmethod
    def on_failure(self, failure: Failure) -> None:
        """Called for every failed evaluation."""


class ConsoleObserver(FailureObserver):
    """Line-delimited log of failures."""

    def on_failure(self, failure: Failure) -> None:
        logger.warning("%s", single_line(strip_ansi(failure.message)))


class JsonObserver(FailureObserver):
    """Keep a JSON array of every failure, rewriting the file each time."""

    def __init__(self, path: str | Path = DEFAULT_JSON_FILE):
        self.path = Path(path)
        self._lock = threading.Lock()
        self._records: list[dict] = []

    @property
    def records(self) -> list[dict]:
        with self._lock:
            return list(self._records)

    def on_failure(self, failure: Failure) -> None:
        record = failure_to_record(failure)
        with self._lock:
            self._records.append(record)
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(
                json.dumps(self._records, indent=2, ensure_ascii=False),
                encoding="utf-8",
            )


class MarkdownObserver(FailureObserver):
    """Append one markdown section per failure; the file is recreated on init."""

    def __init__(self, path: str | Path = DEFAULT_MARKDOWN_FILE):
        self.path = Path(path)
        self._lock = threading.Lock()
        self.path.unlink(missing_ok=True)

    def on_failure(self, failure: Failure) -> None:
        text = failure_to_markdown(failure)
        with self._lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "a", encoding="utf-8") as fh:
                fh.write(text)
