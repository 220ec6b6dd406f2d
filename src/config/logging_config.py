# src/config/logging_config.py

"""Per-run logging for ecoshop.

Every launch writes a fresh ``logs/run_<YYYYmmdd_HHMMSS>.log`` holding
all ``ecoshop.*`` records at DEBUG, so the catalog, scoring, comparison
and AI bridge activity of one run can be read together.  Only warnings
and errors reach stderr; stdout belongs to the CLI's JSON and tables.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from src.config.settings import Settings

ROOT_LOGGER_NAME = "ecoshop"

_FILE_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | "
    "%(module)s:%(funcName)s:%(lineno)d | %(message)s"
)
_STDERR_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _configured(
    handler: logging.Handler, level: int, fmt: str,
) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=_DATE_FORMAT))
    return handler


def setup_logging(logs_dir: Path | None = None) -> Path:
    """Attach the run-file and stderr handlers to the ``ecoshop`` logger.

    Args:
        logs_dir: Where to create the run log. Defaults to
            ``Settings.LOGS_DIR``.

    Returns:
        Path of this run's log file.  When handlers are already attached
        (a second call in the same process) nothing is added and the
        returned path is not created.
    """
    directory = logs_dir or Settings.LOGS_DIR
    directory.mkdir(parents=True, exist_ok=True)
    log_file = directory / f"run_{datetime.now():%Y%m%d_%H%M%S}.log"

    project_logger = logging.getLogger(ROOT_LOGGER_NAME)
    project_logger.setLevel(logging.DEBUG)
    if project_logger.handlers:
        return log_file

    project_logger.addHandler(
        _configured(
            logging.FileHandler(log_file, encoding="utf-8"),
            logging.DEBUG,
            _FILE_FORMAT,
        )
    )
    project_logger.addHandler(
        _configured(
            logging.StreamHandler(sys.stderr),
            logging.getLevelName(Settings.CONSOLE_LOG_LEVEL),
            _STDERR_FORMAT,
        )
    )
    project_logger.info("Logging to %s", log_file)
    return log_file
