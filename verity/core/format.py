"""Value formatting for assertion messages.

Every message produced here is deterministic for identical inputs: objects
that only carry the default ``object.__repr__`` are rendered from their
attributes instead of their memory address.
"""

from __future__ import annotations

import inspect
import re
from collections.abc import Iterable, Mapping
from enum import Enum

from rich.console import Console
from rich.text import Text

NULL = "<NULL>"
ELLIPSIS = "..."
CYCLE = "<cycle>"

# Marker for "no expected value" in two-operand message templates.
NOTHING = type("Nothing", (), {"__repr__": lambda self: "NOTHING"})()

MAX_VALUE_LENGTH = 50
MAX_FORMAT_DEPTH = 5

STYLE_ACTUAL = "red"
STYLE_EXPECTED = "green"
STYLE_CODE = "yellow"
STYLE_EMPHASIS = "bold"

_ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")

_console = Console(
    force_terminal=True,
    color_system="standard",
    highlight=False,
    soft_wrap=True,
    width=10_000,
)


def paint(text: object, style: str, colorize: bool) -> str:
    """Wrap *text* in ANSI styling when *colorize* is set."""
    plain = f"{text}"
    if not colorize:
        return plain
    with _console.capture() as capture:
        _console.print(Text(plain, style=style), end="")
    return capture.get()


def strip_ansi(text: str) -> str:
    return _ANSI_RE.sub("", text)


def format_value(value: object, limit: int = MAX_VALUE_LENGTH) -> str:
    """Render *value* the way it appears in failure messages.

    Containers and plain objects are expanded at most ``MAX_FORMAT_DEPTH``
    levels deep and a value nested inside itself prints as ``<cycle>``.
    Output stops growing once *limit* characters are reached.
    """
    return _format(value, limit, set(), 0)


def _format(value: object, limit: int, active: set[int], depth: int) -> str:
    if value is None:
        return NULL
    if isinstance(value, str):
        return f'"{value}"'
    if isinstance(value, (bytes, bytearray)):
        return repr(bytes(value))
    if isinstance(value, BaseException):
        return str(value)
    if isinstance(value, Enum):
        return f"{type(value).__name__}.{value.name}"
    if isinstance(value, type):
        return value.__name__
    mapping = isinstance(value, Mapping)
    listish = not mapping and _is_listish(value)
    if not (mapping or listish):
        if inspect.isroutine(value):
            return f"{getattr(value, '__qualname__', type(value).__name__)}()"
        if not _has_default_repr(value):
            return f"{value}"
    if id(value) in active:
        return CYCLE
    if depth >= MAX_FORMAT_DEPTH:
        return ELLIPSIS

    def inner(item):
        return _format(item, limit, active, depth + 1)

    active.add(id(value))
    try:
        if mapping:
            items = (f"{inner(k)}: {inner(v)}" for k, v in value.items())
            return _join("{", items, ", ", "}", limit)
        if listish:
            return _join("[", map(inner, value), "|", "]", limit)
        members = (f"{k}={inner(v)}" for k, v in vars(value).items())
        return _join(f"{type(value).__name__}{{", members, ", ", "}", limit)
    finally:
        active.discard(id(value))


def format_type(value: object) -> str:
    if value is None or isinstance(value, type):
        return ""
    return f" ({type(value).__name__})"


def format_full(value: object) -> str:
    """Value plus its type name, used when operand types differ."""
    return format_value(value) + format_type(value)


def describe_pair(actual: object, expected: object) -> tuple[str, str]:
    """Format two operands, adding type names only when the types differ."""
    if type(actual) is type(expected):
        return format_value(actual), format_value(expected)
    return format_full(actual), format_full(expected)


def actually(
    actual: object,
    relation: str,
    expected: object = NOTHING,
    colorize: bool = False,
) -> str:
    """Build the three-line ``actual / relation / expected`` message body."""
    if expected is NOTHING:
        parts = [paint(format_full(actual), STYLE_ACTUAL, colorize), relation]
    else:
        a, e = describe_pair(actual, expected)
        parts = [
            paint(a, STYLE_ACTUAL, colorize),
            relation,
            paint(e, STYLE_EXPECTED, colorize),
        ]
    return "\n\t" + "\n\t".join(parts) + "\n"


def with_details(message: str, lines: list[str], limit: int) -> str:
    """Append an indented block of detail lines, truncated to *limit* entries."""
    shown = truncate(lines, limit)
    return f"{message.rstrip()}\n\n\t" + "\n\t".join(shown) + "\n"


def truncate(lines: list[str], limit: int) -> list[str]:
    if len(lines) > limit:
        return [*lines[:limit], ELLIPSIS]
    return list(lines)


def single_line(message: str) -> str:
    """Collapse a multi-line failure message into one log line."""
    return " ".join(part.strip() for part in message.splitlines() if part.strip())


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _join(opening: str, parts: Iterable[str], sep: str, closing: str, limit: int) -> str:
    text = opening
    for i, part in enumerate(parts):
        text += (sep if i else "") + part
        if len(text) >= limit:
            return text[:limit]
    text += closing
    return text if len(text) <= limit else text[:limit]


def _is_listish(value: object) -> bool:
    if isinstance(value, (str, bytes, bytearray, Mapping)):
        return False
    if hasattr(value, "_fields") or getattr(value, "ndim", None) == 0:
        return False
    return isinstance(value, (list, tuple, set, frozenset)) or (
        isinstance(value, Iterable) and hasattr(value, "__len__") and hasattr(value, "__getitem__")
    )


def _has_default_repr(value: object) -> bool:
    cls = type(value)
    return (
        cls.__repr__ is object.__repr__
        and cls.__str__ is object.__str__
        and hasattr(value, "__dict__")
    )
