"""Logging setup.

Hides where log records go. The terminal belongs to the TUI, so nothing
is written to stderr while it runs: records go to an optional log file
and, inside the app, to the debug panel.
"""

import logging
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
PACKAGE_LOGGER = "hank_tui"


def parse_level(level: str | int | None, default: int = logging.WARNING) -> int:
    """Turn ``"debug"``/``"INFO"``/``20`` into a logging level number."""
    if level is None:
        return default
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.upper())
    return value if isinstance(value, int) else default


def configure_logging(
    level: str | int | None = None,
    log_file: str | Path | None = None,
) -> logging.Logger:
    """Configure the package logger.

    Args:
        level: Threshold for package records (default WARNING)
        log_file: Append records to this file when given

    Returns:
        The package logger, for attaching further handlers
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(parse_level(level))
    logger.propagate = False

    for handler in list(logger.handlers):
        if isinstance(handler, logging.FileHandler):
            logger.removeHandler(handler)
            handler.close()

    if log_file is not None:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(file_handler)

    if not logger.handlers:
        logger.addHandler(logging.NullHandler())
    return logger
