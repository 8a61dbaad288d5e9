"""
verity: fluent assertions with structural diffs

    from verity import that, AssertionContext

    that(answer).is_(42)

    with AssertionContext.begin():
        that(user).is_matching(expected_user)
        that(user.roles).is_equivalent_to(["admin", "dev"])

Submodules:
    compare   structural, multiset, tolerance and JSON comparison
    core      failures, contexts, configuration, orchestration
    report    adapters, listeners, observers
"""

__version__ = "0.1.0"

from .assertions import Subject, that
from .compare import Difference, DifferenceKind, differences, json_differences, register_schema
from .core.assertion import Check, failed, passed
from .core.config import Configuration, apply_config_file, get_config, load_config, reset_config, set_config
from .core.context import AssertionContext, active_config
from .core.frames import custom_assertion
from .core.types import (
    AssertionEvent,
    AssertionFailedError,
    ConfigError,
    Failure,
    MultipleFailuresError,
    SourceLocation,
    UsageError,
    VerityError,
)

__all__ = [
    "__version__",
    # fluent
    "that",
    "Subject",
    # comparison
    "differences",
    "json_differences",
    "register_schema",
    "Difference",
    "DifferenceKind",
    # orchestration
    "Check",
    "passed",
    "failed",
    "custom_assertion",
    "AssertionContext",
    # configuration
    "Configuration",
    "get_config",
    "set_config",
    "reset_config",
    "load_config",
    "apply_config_file",
    "active_config",
    # data & errors
    "Failure",
    "AssertionEvent",
    "SourceLocation",
    "VerityError",
    "UsageError",
    "ConfigError",
    "AssertionFailedError",
    "MultipleFailuresError",
]
