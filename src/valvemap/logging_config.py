"""
Handler setup for the ``valvemap`` command.

Modules only call ``logging.getLogger(__name__)``; handlers are attached
here, once, by the CLI.
"""
import logging
import sys
from typing import Optional

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def setup_logging(level: int = logging.WARNING, log_file: Optional[str] = None) -> logging.Logger:
    """Route ``valvemap.*`` records to stderr and optionally to ``log_file``.

    Handlers from an earlier call are closed and replaced.
    """
    logger = logging.getLogger("valvemap")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT)
    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.setLevel(level)
    return logger
