"""
Reporting

Adapters decide what happens to failures that are not buffered by an
assertion context; listeners and observers see every evaluation.

    from verity.report import StatisticsListener
    from verity import set_config

    stats = StatisticsListener()
    set_config(listener=stats)
    ...
    print(stats.summary())
"""

from .adapters import (
    ConsoleAdapter,
    CustomExceptionAdapter,
    DefaultAdapter,
    MarkdownAdapter,
    ReportingAdapter,
    create_error,
)
from .listeners import (
    AssertionListener,
    AssertionStats,
    ConsoleListener,
    DelegateListener,
    StatisticsListener,
)
from .observers import ConsoleObserver, FailureObserver, JsonObserver, MarkdownObserver
from .registry import (
    adapter_names,
    create_adapter,
    create_listener,
    listener_names,
    register_adapter,
    register_listener,
)
from .render import failure_to_markdown, failure_to_record

__all__ = [
    # adapters
    "ReportingAdapter",
    "DefaultAdapter",
    "ConsoleAdapter",
    "MarkdownAdapter",
    "CustomExceptionAdapter",
    "create_error",
    # listeners
    "AssertionListener",
    "AssertionStats",
    "ConsoleListener",
    "DelegateListener",
    "StatisticsListener",
    # observers
    "FailureObserver",
    "ConsoleObserver",
    "JsonObserver",
    "MarkdownObserver",
    # registry
    "register_adapter",
    "register_listener",
    "create_adapter",
    "create_listener",
    "adapter_names",
    "listener_names",
    # rendering
    "failure_to_markdown",
    "failure_to_record",
]
