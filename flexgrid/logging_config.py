"""
Logging for the grid layout and its demo window.

Everything logs below the 'flexgrid' logger. The layout engine reports
every pass at DEBUG, which floods the console while a window is being
resized, so it gets its own level.
"""
import logging
import sys
from typing import Optional

from flexgrid.version import APP_VERSION

ROOT_LOGGER = "flexgrid"
ENGINE_LOGGER = "flexgrid.model.layout_engine"

LOG_FORMAT = '%(asctime)s %(levelname)-7s [%(name)s] %(message)s'
DATE_FORMAT = '%H:%M:%S'


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None,
                  engine_level: int = logging.INFO) -> logging.Logger:
    """
    Route 'flexgrid' logs to stdout and, optionally, a file.

    Args:
        level: Level for the package logger and its handlers.
        log_file: Path of a log file, truncated on each start.
        engine_level: Level for the per-pass layout engine messages.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)

    # Re-running setup replaces the handlers instead of stacking them
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='w', encoding='utf-8'))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logging.getLogger(ENGINE_LOGGER).setLevel(engine_level)

    logger.debug("Flexible Grid Layout %s, logging at %s", APP_VERSION, logging.getLevelName(level))
    return logger
