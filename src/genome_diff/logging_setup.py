"""
Logging setup for genome-diff.
Every module logs through the shared "genome-diff" logger; this module wires
that logger to a rich console handler.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "genome-diff"


def setup_logging(level=logging.INFO, console: Optional[Console] = None) -> logging.Logger:
    """
    Configure rich console logging for the genome-diff logger.

    Args:
        level: Logging level for the project logger
        console: Optional rich Console to write to

    Returns:
        The configured project logger
    """
    console = console or Console(stderr=True)
    log = logging.getLogger(LOGGER_NAME)
    log.setLevel(level)

    # Replace a previously installed rich handler instead of stacking them
    for handler in list(log.handlers):
        if isinstance(handler, RichHandler):
            log.removeHandler(handler)

    handler = RichHandler(rich_tracebacks=True, console=console)
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    log.addHandler(handler)
    return log
