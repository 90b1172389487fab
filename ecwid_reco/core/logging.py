# ecwid_reco/core/logging.py
import logging
import sys
from typing import Optional, TextIO

import colorlog

LOG_FORMAT = "%(log_color)s%(asctime)s %(levelname)-8s [%(name)s]%(reset)s %(message)s"

LEVEL_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "bold_red",
}

# Batch runs log one line per product at DEBUG; drivers stay at WARNING under it
QUIET_LOGGERS = ("pymongo", "motor", "asyncio")


def configure_logging(level=logging.INFO, stream: Optional[TextIO] = None):
    """
    Colored root handler. The API logs to stdout; the regenerate job passes
    stderr so its JSON report on stdout stays parseable.
    """
    stream = stream or sys.stdout
    handler = colorlog.StreamHandler(stream)
    handler.setFormatter(
        colorlog.ColoredFormatter(
            LOG_FORMAT,
            datefmt="%H:%M:%S",
            log_colors=LEVEL_COLORS,
            no_color=not stream.isatty(),
        )
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = [handler]

    for name in ("uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).setLevel(level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
