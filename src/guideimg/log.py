"""Logging setup for command-line use.

Library modules only create loggers; handlers are installed here, once.
"""

import logging
from typing import Union

from rich.logging import RichHandler


def setup_logging(level: Union[int, str] = logging.INFO) -> logging.Logger:
    """Route ``guideimg`` log records to a rich console handler.

    Args:
        level: Logging level name or number.

    Returns:
        The package logger.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    logger = logging.getLogger("guideimg")
    logger.setLevel(level)
    logger.propagate = False
    logger.handlers.clear()

    handler = RichHandler(show_path=False, rich_tracebacks=True)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)

    return logger
