"""
Failure rendering

Markdown sections and JSON-ready records built from :class:`Failure`.
"""

from __future__ import annotations

from verity.core.format import format_value, strip_ansi
from verity.core.types import Failure


def failure_to_markdown(failure: Failure) -> str:
    """
    Render one failure as a markdown section

    A table of sub-failures is added when the failure folds several
    structural differences.

    Args:
        failure: the failure to render

    Returns:
        markdown text ending with a blank line
    """
    lines = []
    lines.append(f"# ❌ Assertion failed: `{failure.assertion or '?'}`")
    lines.append("")
    if failure.source:
        lines.append(f"**Location:** `{failure.file}` line {failure.line}")
        lines.append("")
    lines.append("## 📋 Summary")
    lines.append("")

    summary = strip_ansi(failure.message).strip()
    if failure.sub_failures is None:
        lines.extend(f"\t{line.strip()}" if line.strip() else "" for line in summary.splitlines())
        lines.append("")
        return "\n".join(lines) + "\n"

    lines.append(summary)
    lines.append("")
    lines.append("## 🔍 Details")
    lines.append("")
    lines.append("| Path | Message | Actual | Expected |")
    lines.append("|------|---------|--------|----------|")
    for sub in failure.sub_failures:
        path, text = split_path(strip_ansi(sub.message))
        lines.append(
            f"| `{path}` | {_escape(text)} | `{_escape(format_value(sub.actual))}` "
            f"| `{_escape(format_value(sub.expected))}` |"
        )
    lines.append("")
    return "\n".join(lines) + "\n"


def failure_to_record(failure: Failure) -> dict:
    """Plain dict of a failure for the JSON report."""
    record = {
        "message": strip_ansi(failure.message).strip(),
        "actual": format_value(failure.actual),
        "expected": format_value(failure.expected),
        "assertion": failure.assertion,
        "file": failure.file,
        "line": failure.line,
        "code": failure.code,
        "timestamp": failure.timestamp.isoformat(),
    }
    if failure.exception_type is not None:
        record["exception_type"] = failure.exception_type.__name__
    if failure.sub_failures is not None:
        record["sub_failures"] = [
            {
                "message": strip_ansi(sub.message),
                "actual": format_value(sub.actual),
                "expected": format_value(sub.expected),
            }
            for sub in failure.sub_failures
        ]
    return record


def split_path(message: str) -> tuple[str, str]:
    """Split a ``path: text`` sub-failure message."""
    path, sep, text = message.partition(": ")
    if not sep:
        return "", message.strip()
    return path.strip(), text.strip()


def _escape(text: str) -> str:
    return text.replace("|", "\\|").replace("\n", " ")
