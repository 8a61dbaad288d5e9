"""
Value classification

Decides how the structural comparator treats a value and which members of
a composite object take part in a comparison.
"""

from __future__ import annotations

import dataclasses
import uuid
from collections.abc import Iterable, Mapping
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum
from fractions import Fraction
from functools import lru_cache
from pathlib import PurePath
from typing import Any

import numpy as np


class ValueKind(str, Enum):
    NULL = "null"
    SIMPLE = "simple"
    FLOATING = "floating"
    MAPPING = "mapping"
    SEQUENCE = "sequence"
    COMPOSITE = "composite"


SIMPLE_TYPES: tuple[type, ...] = (
    bool,
    int,
    complex,
    str,
    bytes,
    bytearray,
    Enum,
    Decimal,
    Fraction,
    date,
    datetime,
    time,
    timedelta,
    uuid.UUID,
    PurePath,
    set,
    frozenset,
    type,
)

_schemas: dict[type, tuple[str, ...]] = {}


def register_schema(cls: type, members: Iterable[str]) -> None:
    """Fix the members compared for instances of *cls*."""
    _schemas[cls] = tuple(members)
    _static_members.cache_clear()


def unregister_schema(cls: type) -> None:
    _schemas.pop(cls, None)
    _static_members.cache_clear()


def classify(value: object) -> ValueKind:
    if value is None:
        return ValueKind.NULL
    if isinstance(value, (float, np.floating)):
        return ValueKind.FLOATING
    if isinstance(value, np.ndarray):
        if value.ndim == 0:
            return classify(value.item())
        return ValueKind.SEQUENCE
    if isinstance(value, np.generic):
        return ValueKind.SIMPLE
    if isinstance(value, SIMPLE_TYPES):
        return ValueKind.SIMPLE
    if isinstance(value, Mapping):
        return ValueKind.MAPPING
    if is_namedtuple(value):
        return ValueKind.COMPOSITE
    if isinstance(value, Iterable):
        return ValueKind.SEQUENCE
    return ValueKind.COMPOSITE


def is_simple(value: object) -> bool:
    return classify(value) in (ValueKind.SIMPLE, ValueKind.FLOATING)


def is_namedtuple(value: object) -> bool:
    return isinstance(value, tuple) and hasattr(type(value), "_fields")


def normalize_scalar(value: object) -> object:
    """Unwrap numpy scalars and 0-d arrays to their Python equivalent."""
    if isinstance(value, (np.generic, np.ndarray)) and np.ndim(value) == 0:
        return value.item()
    return value


def type_family(value: object) -> type:
    """Runtime type used for type-mismatch checks; numpy scalars map to Python types."""
    return type(normalize_scalar(value))


# ---------------------------------------------------------------------------
# Member enumeration
# ---------------------------------------------------------------------------

@lru_cache(maxsize=None)
def _static_members(cls: type) -> tuple[tuple[str, ...], tuple[str, ...], bool]:
    """Per-type part of :func:`describe`: (fields, properties, uses_vars)."""
    if cls in _schemas:
        return _schemas[cls], (), False
    if dataclasses.is_dataclass(cls):
        fields = tuple(f.name for f in dataclasses.fields(cls))
        uses_vars = False
    elif hasattr(cls, "_fields") and issubclass(cls, tuple):
        fields = tuple(cls._fields)
        uses_vars = False
    else:
        slots: list[str] = []
        for klass in cls.__mro__:
            for name in getattr(klass, "__slots__", ()):
                if isinstance(name, str) and not name.startswith("_") and name not in slots:
                    slots.append(name)
        fields = tuple(slots)
        uses_vars = True

    properties = []
    for klass in reversed(cls.__mro__):
        for name, attr in vars(klass).items():
            if isinstance(attr, property) and not name.startswith("_") and name not in fields:
                if name not in properties:
                    properties.append(name)
    return fields, tuple(properties), uses_vars


def describe(value: object) -> dict[str, Any]:
    """
    Members of a composite value, in declaration order

    Lookup order: an explicit schema registered for the type, dataclass
    fields, namedtuple fields, ``__slots__`` and instance ``vars()``; public
    properties are appended. Private names (leading underscore) are skipped.
    A registered schema is used as-is.

    Args:
        value: the object to describe

    Returns:
        mapping of member name to value
    """
    fields, properties, uses_vars = _static_members(type(value))
    names = list(fields)
    if uses_vars:
        for name in getattr(value, "__dict__", {}):
            if not name.startswith("_") and name not in names:
                names.append(name)
    names.extend(p for p in properties if p not in names)

    members: dict[str, Any] = {}
    for name in names:
        try:
            members[name] = getattr(value, name)
        except AttributeError:
            continue
    return members
