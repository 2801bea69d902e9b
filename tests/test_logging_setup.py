# tests/test_logging_setup.py

from __future__ import annotations

import logging

from chore_ledger.logging_setup import _ConsoleNoiseFilter


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


def test_console_filter_floors() -> None:
    f = _ConsoleNoiseFilter()

    assert f.filter(_record("chore_ledger.core.coordinator", logging.INFO))
    assert not f.filter(_record("chore_ledger.storage.sqlite_backend", logging.INFO))
    assert f.filter(_record("chore_ledger.storage.sqlite_backend", logging.WARNING))
    assert not f.filter(_record("py.warnings", logging.WARNING))
    assert not f.filter(_record("urllib3", logging.WARNING))
    assert f.filter(_record("urllib3", logging.ERROR))
