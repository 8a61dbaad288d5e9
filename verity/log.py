"""
Logging integration for verity.

Routes the ``verity`` logger to a rich console with level colours. The
library only logs through ``logging.getLogger(__name__)``; installing the
handler is up to the application (the CLI does it on start).

Example:
    >>> from verity import log
    >>> log.setup(logging.DEBUG)
    >>> that(1).is_(2)          # failures logged by ConsoleAdapter show in red
"""
import logging
from typing import Optional

from rich.console import Console
from rich.markup import escape

LOGGER_NAME = "verity"

_LEVEL_STYLES = (
    (logging.ERROR, "bold red"),
    (logging.WARNING, "yellow"),
    (logging.INFO, "blue"),
)


class RichConsoleHandler(logging.Handler):
    """Logging handler that prints to a rich console with colours."""

    def __init__(self, console: Optional[Console] = None, level: int = logging.NOTSET):
        super().__init__(level)
        self.console = console or Console(stderr=True, highlight=False)

    @staticmethod
    def style_for(levelno: int) -> str:
        for threshold, style in _LEVEL_STYLES:
            if levelno >= threshold:
                return style
        return "dim"

    def emit(self, record: logging.LogRecord):
        try:
            msg = self.format(record)
            style = self.style_for(record.levelno)
            self.console.print(f"[{style}]{escape(msg)}[/{style}]")
        except Exception:
            self.handleError(record)


_handler: Optional[RichConsoleHandler] = None


def setup(level: int = logging.INFO, console: Optional[Console] = None) -> RichConsoleHandler:
    """Attach a :class:`RichConsoleHandler` to the ``verity`` logger.

    Calling it again only updates the level.

    Args:
        level: Minimum logging level (default INFO)
        console: Console to print to (default stderr)
    """
    global _handler

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    if _handler is not None:
        return _handler

    _handler = RichConsoleHandler(console)
    _handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(_handler)
    return _handler


def teardown():
    """Remove the verity logging handler and restore the default level."""
    global _handler

    logger = logging.getLogger(LOGGER_NAME)
    if _handler is not None:
        logger.removeHandler(_handler)
        _handler = None
    logger.setLevel(logging.NOTSET)
