"""
Logging setup for the service.

``setup_logging`` attaches a console handler, and a file handler when
``LOG_FILE`` is configured, to the root logger.  Handlers installed
here are tagged so repeated calls (one per ``create_app``) only add the
ones still missing.  Handlers installed by other tools such as uvicorn
or pytest are left alone.
"""

import logging
import os
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_HANDLER_TAG = "_reading_list_handler"


def _tagged(handler: logging.Handler) -> logging.Handler:
    setattr(handler, _HANDLER_TAG, True)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logging(
    level: str = "INFO",
    logfile: Optional[str] = None,
    logger: Optional[logging.Logger] = None,
) -> None:
    """Configure ``logger`` (the root logger by default).

    Parameters
    ----------
    level : str
        Logging level name, case insensitive.  Unknown names fall back
        to ``INFO``.
    logfile : Optional[str]
        File that also receives every record.  Its parent directory is
        created if needed.
    logger : Optional[logging.Logger]
        Logger to configure instead of the root logger.
    """
    logger = logger or logging.getLogger()
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    ours = [h for h in logger.handlers if getattr(h, _HANDLER_TAG, False)]
    if not any(type(h) is logging.StreamHandler for h in ours):
        logger.addHandler(_tagged(logging.StreamHandler()))

    if logfile:
        log_path = Path(os.path.abspath(logfile))
        if any(getattr(h, "baseFilename", None) == str(log_path) for h in ours):
            return
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.addHandler(_tagged(logging.FileHandler(log_path, encoding="utf-8")))
