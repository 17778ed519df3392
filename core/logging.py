import logging
import sys

from core.config import Settings

LOG_LINE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"

_LOGGING_INITIALIZED = False


def setup_logging(settings: Settings) -> None:
    """Attach a single stdout handler to the root logger and route uvicorn through it."""
    global _LOGGING_INITIALIZED
    if _LOGGING_INITIALIZED:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_LINE_FORMAT, datefmt=LOG_DATE_FORMAT))

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(settings.log_level.upper())

    for logger_name in ("uvicorn", "uvicorn.error", "uvicorn.access", "fastapi"):
        log = logging.getLogger(logger_name)
        log.handlers = [handler]
        log.propagate = False

    _LOGGING_INITIALIZED = True
