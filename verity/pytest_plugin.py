"""
pytest integration

Registered through the ``pytest11`` entry point. Provides:

- ``--verity-config PATH``: load a ``verity.yaml`` before the session,
- ``--verity-stats``: print pass/fail counts per assertion at the end,
- ``@pytest.mark.assertion_context``: run the test body inside an
  :class:`AssertionContext` so all its failures are reported together,
- the ``assertion_context`` fixture, yielding the active context.

A test should use either the marker or the fixture; combining them begins two
contexts in the same flow and raises :class:`UsageError`.
"""

from __future__ import annotations

import pytest

from verity.core.config import apply_config_file, get_config
from verity.core.context import AssertionContext
from verity.report.listeners import StatisticsListener

_STATS_KEY = pytest.StashKey[StatisticsListener]()


def pytest_addoption(parser):
    group = parser.getgroup("verity", "verity assertions")
    group.addoption(
        "--verity-config",
        action="store",
        default=None,
        metavar="PATH",
        help="Load verity configuration from a YAML file",
    )
    group.addoption(
        "--verity-stats",
        action="store_true",
        default=False,
        help="Print assertion statistics after the run",
    )


def pytest_configure(config):
    config.addinivalue_line(
        "markers",
        "assertion_context: collect all assertion failures of the test and report them together",
    )
    path = config.getoption("verity_config")
    if path:
        apply_config_file(path)
    if config.getoption("verity_stats"):
        stats = StatisticsListener()
        get_config().listener = stats
        config.stash[_STATS_KEY] = stats


@pytest.hookimpl(wrapper=True)
def pytest_runtest_call(item):
    if item.get_closest_marker("assertion_context") is None:
        return (yield)
    context = AssertionContext.begin(item.name)
    try:
        return (yield)
    finally:
        context.dispose()


def pytest_terminal_summary(terminalreporter, exitstatus, config):
    stats = config.stash.get(_STATS_KEY, None)
    if stats is None:
        return
    terminalreporter.section("verity assertions")
    for line in stats.summary().splitlines():
        terminalreporter.write_line(line)


@pytest.fixture
def assertion_context(request):
    """Active :class:`AssertionContext` for the test; disposed at teardown."""
    with AssertionContext.begin(request.node.name) as context:
        yield context
