# catalog_search/logging_config.py

"""Per-run logging configuration for catalog_search.

Every launch (API server or batch script) gets its own log file in ``logs/``
named after the launch timestamp, e.g. ``logs/run_20261019_153045.log``.
All ``catalog_search.*`` loggers propagate into it.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

from .config import Settings

_DETAILED_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | %(module)s:%(funcName)s:%(lineno)d | "
    "%(message)s"
)
_CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(logs_dir: Optional[Path] = None) -> Path:
    """Initialise the ``catalog_search`` logger for the current run.

    Returns the path of the log file created for this run.
    """
    logs_dir = logs_dir or Settings.LOGS_DIR
    logs_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = logs_dir / f"run_{timestamp}.log"

    root_logger = logging.getLogger("catalog_search")
    root_logger.setLevel(Settings.LOG_LEVEL)

    # Repeated calls (uvicorn reload, tests) must not stack handlers
    if root_logger.handlers:
        return log_file

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(_DETAILED_FORMAT, datefmt=_DATE_FORMAT))

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT, datefmt=_DATE_FORMAT))

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    root_logger.info("Logging initialised, log file: %s", log_file)
    return log_file
