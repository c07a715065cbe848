# bookstore/utils/logging.py
import logging
import os

from rich.logging import RichHandler


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Logger per module, rendered through RichHandler.
    DEBUG env var switches the level to DEBUG.
    """
    logger = logging.getLogger(name or "bookstore")
    log_level = logging.DEBUG if os.getenv("DEBUG") else logging.INFO
    logger.setLevel(log_level)

    if not logger.handlers:
        handler = RichHandler(
            show_time=True,
            show_level=True,
            show_path=False,
            rich_tracebacks=True,
            log_time_format="[%X]",
        )
        handler.setFormatter(logging.Formatter("[%(name)s]  %(message)s"))
        handler.setLevel(log_level)
        logger.addHandler(handler)
        logger.propagate = False

    return logger
