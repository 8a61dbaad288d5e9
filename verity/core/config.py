"""Global configuration and ``verity.yaml`` loading."""

from __future__ import annotations

import dataclasses
import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from verity.compare.approx import DEFAULT_TOLERANCE
from verity.core.types import ConfigError
from verity.report.adapters import DefaultAdapter, ReportingAdapter
from verity.report.listeners import AssertionListener

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "verity.yaml"


@dataclass
class Configuration:
    """Settings consulted by every assertion.

    A context clones the global instance when it begins; the clone is
    shallow, so adapter, listener and observer objects are shared.
    """

    throw_on_failure: bool = True
    tolerance: float = DEFAULT_TOLERANCE
    max_recursion_depth: int = 20
    colorize: bool = False
    append_code_line: bool = True
    max_details: int = 30
    adapter: ReportingAdapter = field(default_factory=DefaultAdapter)
    listener: Optional[AssertionListener] = None
    observer: Optional[AssertionListener] = None

    def validate(self):
        """Raise :class:`ConfigError` for out-of-range values."""
        if isinstance(self.tolerance, bool) or not isinstance(self.tolerance, (int, float)):
            raise ConfigError(f"tolerance must be a number, got {self.tolerance!r}")
        if self.tolerance < 0:
            raise ConfigError(f"tolerance must be >= 0, got {self.tolerance}")
        for name in ("max_recursion_depth", "max_details"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ConfigError(f"{name} must be a positive integer, got {value!r}")
        if not isinstance(self.adapter, ReportingAdapter):
            raise ConfigError(f"adapter must be a ReportingAdapter, got {type(self.adapter).__name__}")
        for name in ("listener", "observer"):
            value = getattr(self, name)
            if value is not None and not isinstance(value, AssertionListener):
                raise ConfigError(f"{name} must be an AssertionListener, got {type(value).__name__}")

    def clone(self) -> Configuration:
        return dataclasses.replace(self)


# Global configuration instance (thread-safe)
_config_lock = threading.Lock()
_global_config: Optional[Configuration] = None


def get_config() -> Configuration:
    """Return the global configuration, creating the default on first use."""
    global _global_config  # pylint: disable=global-statement
    with _config_lock:
        if _global_config is None:
            _global_config = Configuration()
        return _global_config


def set_config(
    throw_on_failure: bool = None,
    tolerance: float = None,
    max_recursion_depth: int = None,
    colorize: bool = None,
    append_code_line: bool = None,
    max_details: int = None,
    adapter: ReportingAdapter = None,
    listener: AssertionListener = None,
    observer: AssertionListener = None,
) -> Configuration:
    """
    Update the global configuration

    Only arguments that are not ``None`` are applied. Listener and observer
    are removed with :func:`reset_config` or ``get_config().listener = None``.

    Example:
        set_config(tolerance=1e-3, colorize=True)
        set_config(adapter=ConsoleAdapter())

    Raises:
        ConfigError: If the resulting configuration is invalid; the previous
            values are kept.
    """
    global _global_config  # pylint: disable=global-statement
    updates = {
        "throw_on_failure": throw_on_failure,
        "tolerance": tolerance,
        "max_recursion_depth": max_recursion_depth,
        "colorize": colorize,
        "append_code_line": append_code_line,
        "max_details": max_details,
        "adapter": adapter,
        "listener": listener,
        "observer": observer,
    }
    with _config_lock:
        current = _global_config or Configuration()
        candidate = dataclasses.replace(
            current, **{k: v for k, v in updates.items() if v is not None}
        )
        candidate.validate()
        _global_config = candidate
        return _global_config


def reset_config():
    """Restore the default configuration."""
    global _global_config  # pylint: disable=global-statement
    with _config_lock:
        _global_config = Configuration()


# ---------------------------------------------------------------------------
# YAML loading
# ---------------------------------------------------------------------------

_SCALAR_KEYS = (
    "throw_on_failure",
    "tolerance",
    "max_recursion_depth",
    "colorize",
    "append_code_line",
    "max_details",
)


def _parse_component(kind: str, raw: Any):
    from verity.report.registry import create_adapter, create_listener

    create = create_adapter if kind == "adapter" else create_listener
    if isinstance(raw, str):
        return create(raw)
    if isinstance(raw, dict) and "name" in raw:
        options = {k: v for k, v in raw.items() if k != "name"}
        return create(raw["name"], **options)
    raise ConfigError(f"{kind} must be a name or a mapping with 'name', got {raw!r}")


def load_config(path: str | Path = DEFAULT_CONFIG_FILE) -> Configuration:
    """Load ``verity.yaml`` into a new :class:`Configuration`.

    Unknown keys are ignored with a warning.

    Raises:
        ConfigError: If the file is missing, malformed or holds invalid values.
    """
    p = Path(path)
    if not p.exists():
        raise ConfigError(f"Configuration file not found: {p}")

    try:
        with open(p, encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {p}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {p}, got {type(data).__name__}")

    known = set(_SCALAR_KEYS) | {"adapter", "listener", "observer"}
    for key in data:
        if key not in known:
            logger.warning("Ignoring unknown configuration key '%s' in %s", key, p)

    values: dict[str, Any] = {k: data[k] for k in _SCALAR_KEYS if k in data}
    for kind in ("adapter", "listener", "observer"):
        if data.get(kind) is not None:
            values[kind] = _parse_component(kind, data[kind])

    config = Configuration(**values)
    config.validate()
    logger.debug("Loaded configuration from %s", p)
    return config


def apply_config_file(path: str | Path = DEFAULT_CONFIG_FILE) -> Configuration:
    """Load ``verity.yaml`` and make it the global configuration."""
    global _global_config  # pylint: disable=global-statement
    config = load_config(path)
    with _config_lock:
        _global_config = config
    return config
