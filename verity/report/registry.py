"""Name registry for adapters and listeners.

Configuration files refer to reporting components by name; host test
frameworks register their own adapter here instead of being detected at runtime.
"""

from __future__ import annotations

from typing import Any, Callable

from verity.core.types import ConfigError
from verity.report.adapters import ConsoleAdapter, DefaultAdapter, MarkdownAdapter, ReportingAdapter
from verity.report.listeners import AssertionListener, ConsoleListener, StatisticsListener
from verity.report.observers import ConsoleObserver, JsonObserver, MarkdownObserver

_adapters: dict[str, Callable[..., ReportingAdapter]] = {
    "default": DefaultAdapter,
    "console": ConsoleAdapter,
    "markdown": MarkdownAdapter,
}

_listeners: dict[str, Callable[..., AssertionListener]] = {
    "console": ConsoleListener,
    "statistics": StatisticsListener,
    "console-failures": ConsoleObserver,
    "json": JsonObserver,
    "markdown": MarkdownObserver,
}


def register_adapter(name: str, factory: Callable[..., ReportingAdapter]) -> None:
    """Make an adapter available under *name*."""
    _adapters[name] = factory


def register_listener(name: str, factory: Callable[..., AssertionListener]) -> None:
    """Make a listener or observer available under *name*."""
    _listeners[name] = factory


def adapter_names() -> list[str]:
    return sorted(_adapters)


def listener_names() -> list[str]:
    return sorted(_listeners)


def create_adapter(name: str, **options: Any) -> ReportingAdapter:
    """Instantiate a registered adapter.

    Raises:
        ConfigError: If *name* is not registered.
    """
    try:
        factory = _adapters[name]
    except KeyError:
        raise ConfigError(
            f"Unknown adapter '{name}' (known: {', '.join(adapter_names())})"
        ) from None
    return factory(**options)


def create_listener(name: str, **options: Any) -> AssertionListener:
    """Instantiate a registered listener or observer.

    Raises:
        ConfigError: If *name* is not registered.
    """
    try:
        factory = _listeners[name]
    except KeyError:
        raise ConfigError(
            f"Unknown listener '{name}' (known: {', '.join(listener_names())})"
        ) from None
    return factory(**options)
