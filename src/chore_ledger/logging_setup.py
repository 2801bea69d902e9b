# src/chore_ledger/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

# Minimum console level per logger prefix. The REPL prints command replies on
# stdout, so snapshot load/save lines would interleave with them.
_CONSOLE_FLOORS: dict[str, int] = {
    "chore_ledger.storage.": logging.WARNING,
    "py.warnings": logging.ERROR,
}


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the chore console readable.

    Command, coordinator and ledger records (credits, skipped credits,
    rejected edits) pass at the handler level. Backend chatter and captured
    warnings have their own floors in _CONSOLE_FLOORS. Loggers outside
    chore_ledger only reach the console at ERROR.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name

        for prefix, floor in _CONSOLE_FLOORS.items():
            if name.startswith(prefix):
                return record.levelno >= floor

        if name.startswith("chore_ledger."):
            return True

        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path = ".local/chores",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Route chore_ledger logs to stderr and to <log_dir>/chores.log.

    The file gets every record at file_level, including each snapshot save,
    so a lost completion or credit can be traced after the fact. Replaces
    any handlers already on the root logger. Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "chores.log"

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    console.addFilter(_ConsoleNoiseFilter())
    root.addHandler(console)

    # Full timestamps in the file only.
    to_file = logging.FileHandler(str(log_file), encoding="utf-8")
    to_file.setLevel(file_level)
    to_file.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root.addHandler(to_file)

    logging.captureWarnings(True)
    return log_file
