"""
JSON comparison and snapshots

Structural diff over parsed JSON documents, plus the canonical JSON text used
for snapshot files.
"""

from __future__ import annotations

import base64
import dataclasses
import json
import logging
import uuid
from collections.abc import Mapping
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum
from fractions import Fraction
from pathlib import Path, PurePath
from typing import Any

import numpy as np

from .classify import describe
from .types import ROOT, ComparisonPath, Difference, DifferenceKind

logger = logging.getLogger(__name__)

_NULL, _OBJECT, _ARRAY, _SCALAR = "null", "object", "array", "scalar"


def _node_kind(node: Any) -> str:
    if node is None:
        return _NULL
    if isinstance(node, dict):
        return _OBJECT
    if isinstance(node, list):
        return _ARRAY
    return _SCALAR


def _scalar_text(node: Any) -> str:
    return json.dumps(node, ensure_ascii=False)


class JsonComparator:
    """
    Structural diff of two JSON documents

    Scalars are equal only when their JSON text is identical, so ``1`` and
    ``1.0`` differ and so do ``true`` and ``1``. Parsed JSON has no cycles,
    so there is no visited set.
    """

    def __init__(self, max_depth: int | None = None):
        if max_depth is None:
            from verity.core.context import active_config

            max_depth = active_config().max_recursion_depth
        self.max_depth = max_depth

    def compare(self, actual_json: str, expected_json: str) -> list[Difference]:
        return self.compare_nodes(json.loads(actual_json), json.loads(expected_json))

    def compare_nodes(self, actual: Any, expected: Any) -> list[Difference]:
        found: list[Difference] = []
        self._compare(actual, expected, ROOT, found)
        return found

    def _compare(self, actual, expected, path: ComparisonPath, found: list[Difference]) -> None:
        kind_a, kind_e = _node_kind(actual), _node_kind(expected)
        if kind_a == _NULL and kind_e == _NULL:
            return
        if kind_a == _NULL or kind_e == _NULL:
            found.append(Difference(path, DifferenceKind.MISMATCH, actual, expected))
            return
        if kind_a != kind_e:
            found.append(Difference(path, DifferenceKind.TYPE_MISMATCH, actual, expected))
            return
        if kind_a == _SCALAR:
            if _scalar_text(actual) != _scalar_text(expected):
                found.append(Difference(path, DifferenceKind.MISMATCH, actual, expected))
            return

        if len(path) > self.max_depth:
            found.append(Difference(path, DifferenceKind.TOO_DEEP, None, self.max_depth))
            return

        if kind_a == _OBJECT:
            for key in actual:
                if key not in expected:
                    found.append(Difference(path.key(key), DifferenceKind.UNEXPECTED, actual[key], None))
            for key in expected:
                if key not in actual:
                    found.append(Difference(path.key(key), DifferenceKind.MISSING, None, expected[key]))
            for key in actual:
                if key in expected:
                    self._compare(actual[key], expected[key], path.key(key), found)
            return

        if len(actual) != len(expected):
            found.append(Difference(path, DifferenceKind.COUNT_MISMATCH, len(actual), len(expected)))
            return
        for position, (a, e) in enumerate(zip(actual, expected)):
            self._compare(a, e, path.index(position), found)


def json_differences(
    actual_json: str, expected_json: str, *, max_depth: int | None = None
) -> list[Difference]:
    """Differences between two JSON texts; empty when structurally identical."""
    return JsonComparator(max_depth).compare(actual_json, expected_json)


# ---------------------------------------------------------------------------
# Canonical JSON
# ---------------------------------------------------------------------------

def to_plain(value: Any, _active: set[int] | None = None) -> Any:
    """
    Convert *value* into JSON-compatible builtins

    Raises:
        ValueError: If *value* contains a reference cycle.
    """
    active = set() if _active is None else _active

    if value is None or isinstance(value, (bool, str)):
        return value
    if isinstance(value, Enum):
        return to_plain(value.value, active)
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, np.generic):
        return value.item()
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, timedelta):
        return value.total_seconds()
    if isinstance(value, (uuid.UUID, Decimal, Fraction, PurePath)):
        return str(value)
    if isinstance(value, complex):
        return [value.real, value.imag]
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(bytes(value)).decode("ascii")

    marker = id(value)
    if marker in active:
        raise ValueError(f"Cannot serialize a cyclic reference ({type(value).__name__})")
    active.add(marker)
    try:
        if isinstance(value, Mapping):
            return {str(k): to_plain(v, active) for k, v in value.items()}
        if isinstance(value, (set, frozenset)):
            items = [to_plain(v, active) for v in value]
            return sorted(items, key=lambda item: json.dumps(item, sort_keys=True))
        if isinstance(value, (list, tuple)) and not hasattr(value, "_fields"):
            return [to_plain(v, active) for v in value]
        if dataclasses.is_dataclass(value) and not isinstance(value, type):
            return {f.name: to_plain(getattr(value, f.name), active) for f in dataclasses.fields(value)}
        members = describe(value)
        if members:
            return {k: to_plain(v, active) for k, v in members.items()}
        if hasattr(value, "__iter__"):
            return [to_plain(v, active) for v in value]
        cls = type(value)
        if cls.__str__ is object.__str__ and cls.__repr__ is object.__repr__:
            return cls.__qualname__
        return str(value)
    finally:
        active.discard(marker)


def to_canonical_json(value: Any) -> str:
    """Sorted keys, two-space indent, non-ASCII kept; stable for identical input."""
    return json.dumps(to_plain(value), sort_keys=True, indent=2, ensure_ascii=False)


def save_snapshot(value: Any, path: str | Path) -> Path:
    """Write the canonical JSON of *value* to *path* with a trailing newline."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(to_canonical_json(value) + "\n", encoding="utf-8")
    logger.info("snapshot written: %s", path)
    return path


def load_snapshot(path: str | Path) -> str:
    return Path(path).read_text(encoding="utf-8")


def snapshot_differences(value: Any, path: str | Path, *, max_depth: int | None = None) -> list[Difference]:
    """Diff the canonical JSON of *value* against the snapshot stored at *path*."""
    return json_differences(to_canonical_json(value), load_snapshot(path), max_depth=max_depth)
