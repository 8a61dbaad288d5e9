"""Tests for verity.log: rich console logging."""

import logging

from rich.console import Console

from verity import log


def make_console():
    return Console(record=True, width=200, color_system=None)


class TestSetup:
    def teardown_method(self):
        log.teardown()

    def test_attaches_handler(self):
        handler = log.setup(logging.DEBUG, console=make_console())
        logger = logging.getLogger("verity")
        assert handler in logger.handlers
        assert logger.level == logging.DEBUG

    def test_idempotent(self):
        first = log.setup(console=make_console())
        second = log.setup(logging.ERROR)
        assert first is second
        assert logging.getLogger("verity").handlers.count(first) == 1
        assert logging.getLogger("verity").level == logging.ERROR

    def test_teardown_restores(self):
        handler = log.setup(logging.DEBUG, console=make_console())
        log.teardown()
        logger = logging.getLogger("verity")
        assert handler not in logger.handlers
        assert logger.level == logging.NOTSET

    def test_child_logger_printed(self):
        console = make_console()
        log.setup(logging.INFO, console=console)
        logging.getLogger("verity.compare.json_compare").info("wrote [snapshot]")
        assert "wrote [snapshot]" in console.export_text()


class TestStyles:
    def test_levels(self):
        assert log.RichConsoleHandler.style_for(logging.ERROR) == "bold red"
        assert log.RichConsoleHandler.style_for(logging.WARNING) == "yellow"
        assert log.RichConsoleHandler.style_for(logging.INFO) == "blue"
        assert log.RichConsoleHandler.style_for(logging.DEBUG) == "dim"
