"""Logging setup for the command line and TUI."""

import logging

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(verbosity: int = 0) -> logging.Logger:
    """Send log records to stderr.

    WARNING by default, INFO with one ``-v``, DEBUG with two or more.
    """
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    handler = RichHandler(
        console=Console(stderr=True),
        show_time=verbosity > 0,
        show_path=verbosity >= 2,
        markup=False,
    )
    logging.basicConfig(level=level, format="%(message)s", handlers=[handler], force=True)

    # GitPython logs every git invocation at DEBUG
    logging.getLogger("git").setLevel(max(level, logging.INFO))
    return logging.getLogger("contrib_inspector")
