"""
Hoversort — Logging Configuration
Sets up console (and optional file) logging for the CLI and gallery.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
# Loggers that belong to this project (module loggers use __name__)
PROJECT_LOGGERS = ("core", "effects", "gallery_ui", "hoversort")


def setup_logging(level: int = logging.INFO, log_file: str | None = None) -> None:
    """Configure project loggers.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO).
        log_file: Optional path to also write logs to.
    """
    formatter = logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S")

    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode="w", encoding="utf-8"))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)

    for name in PROJECT_LOGGERS:
        logger = logging.getLogger(name)
        logger.setLevel(level)
        # Avoid duplicate output when called twice
        logger.handlers.clear()
        for handler in handlers:
            logger.addHandler(handler)
