"""Logging setup for the API process and the CLI."""

import logging
import sys

from journal.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

# Third-party loggers that are too chatty at INFO
_QUIET_LOGGERS = ("apscheduler", "sqlalchemy.engine", "uvicorn.access")


def setup_logging(level: str | None = None) -> None:
    """Configure the root logger once; repeated calls just update the level."""
    level_name = (level or settings.log_level).upper()
    root = logging.getLogger()

    if not any(getattr(h, "_journal_handler", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._journal_handler = True
        root.addHandler(handler)

    root.setLevel(level_name)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
