from __future__ import annotations

import logging
import sys

from rich.console import Console
from rich.logging import RichHandler

from subscribarr.env import get_logging_env


def _console() -> Console:
    # Resolved per handler so pytest's capsys sees the swapped stdout.
    return Console(file=sys.stdout, soft_wrap=True)


class ConsoleGateFilter(logging.Filter):
    """
    Drop console output when quiet mode is enabled.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        return not get_logging_env().quiet


def build_console_handler(level: int = logging.INFO) -> logging.Handler:
    handler = RichHandler(
        console=_console(),
        show_level=True,
        show_time=False,
        show_path=False,
        markup=False,
    )
    handler.setLevel(level)

    # RichHandler renders the level column; the formatter must not repeat it.
    handler.setFormatter(logging.Formatter("%(message)s"))

    handler.addFilter(ConsoleGateFilter())
    return handler
