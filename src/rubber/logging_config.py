# rubber/logging_config.py
import logging
import sys

from .errors import RubberError

# Loggers a run triggers without asking for them
LIBRARY_LOGGERS = ("aiohttp.client", "aiohttp.internal", "aiohttp.access", "asyncio")


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    library_level: str = "WARNING",
) -> logging.Logger:
    """
    Send rubber's logs to stderr so stdout carries only the report.

    aiohttp and asyncio stay at `library_level` even under --debug, or a
    debug run drowns in per-connection chatter. An uncaught RubberError is
    logged as one line; anything else keeps its traceback.
    """
    logger = logging.getLogger()
    logger.setLevel(level.upper())

    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)-20s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
        logger.info(f"Logging to file: {log_file}")

    for name in LIBRARY_LOGGERS:
        logging.getLogger(name).setLevel(library_level.upper())

    def handle_exception(exc_type, exc_value, exc_traceback):
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_traceback)
            return
        if issubclass(exc_type, RubberError):
            logger.error(f"{exc_type.__name__}: {exc_value}")
            return
        logger.error("Uncaught exception", exc_info=(exc_type, exc_value, exc_traceback))

    sys.excepthook = handle_exception

    return logger
