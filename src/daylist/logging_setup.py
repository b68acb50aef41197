# src/daylist/logging_setup.py

"""
Logging for the console app.

The terminal doubles as the task list, so stderr only carries daylist's own records
at the configured level (WARNING by default) and ERROR+ from anything else.
`<data_dir>/daylist.log` gets every record from DEBUG up.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FILE_NAME = "daylist.log"

CONSOLE_FORMAT = "%(levelname)s %(name)s: %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s [%(threadName)s] %(message)s"


def is_daylist_record(record: logging.LogRecord) -> bool:
    return record.name == "daylist" or record.name.startswith("daylist.")


def console_filter(record: logging.LogRecord) -> bool:
    """Own records pass (the handler level applies); foreign ones only at ERROR+."""
    return is_daylist_record(record) or record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path,
    console_level: int = logging.WARNING,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Install the stderr and file handlers on the root logger, replacing any present.

    Returns the log file path. Call once, before the first record is logged.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(min(console_level, file_level))
    for h in list(root.handlers):
        root.removeHandler(h)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    console.addFilter(console_filter)
    root.addHandler(console)

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(file_level)
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    root.addHandler(file_handler)

    # warnings.warn(...) shows up as "py.warnings": file only, unless ERROR+.
    logging.captureWarnings(True)
    return log_file
