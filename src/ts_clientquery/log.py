"""Logging configuration for ts-clientquery."""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOGGER_NAME = "ts_clientquery"

# Wire traces (every payload sent and received) are logged at DEBUG
_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def setup_logging(log_path: Path, *, name: str = LOGGER_NAME, level: int = logging.DEBUG) -> logging.Logger:
    """Attach a rotating file handler to the named logger and return it.

    Idempotent: a logger that already has handlers is returned unchanged.

    Args:
        log_path: Log file; rotated at 1 MB, three backups kept.
        name: Logger to configure. Connections log under ``ts_clientquery.connection``.
        level: Minimum level written; DEBUG includes wire traces.

    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    handler = RotatingFileHandler(log_path, maxBytes=1_000_000, backupCount=3)
    handler.setFormatter(logging.Formatter(fmt=_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))

    logger.setLevel(level)
    logger.addHandler(handler)
    return logger
