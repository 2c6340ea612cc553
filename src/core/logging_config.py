"""Logging setup shared by the API server and the seed script."""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from config import LOG_FILE, LOG_LEVEL

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_configured = False


def setup_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> None:
    """Configure the root logger once.

    Args:
        level: Log level name. Defaults to LOG_LEVEL.
        log_file: Optional path of a rotating log file. Defaults to LOG_FILE.
    """
    global _configured
    if _configured:
        return

    logging.basicConfig(level=level or LOG_LEVEL, format=LOG_FORMAT)

    log_file = log_file or LOG_FILE
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(log_file, maxBytes=1024 * 1024, backupCount=10)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logging.getLogger().addHandler(file_handler)

    # SQL echo is noisy at INFO
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    _configured = True
