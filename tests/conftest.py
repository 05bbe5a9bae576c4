"""
tests/conftest.py
Shared fixtures for fdb tests.
Provides an isolated HOME / database path and a store + engine pinned to a fixed clock.
"""

import logging
import os
import pytest

from core.engine import FrecencyEngine
from core.store import FrecencyStore

NOW = 1_700_000_000


@pytest.fixture
def tmp_workdir(tmp_path, monkeypatch):
    """Isolated cwd + HOME with no FDB_* settings leaking in from the real environment."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    for var in list(os.environ):
        if var.startswith("FDB_") or var in ("NO_COLOR", "FORCE_COLOR"):
            monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("FDB_CONFIG", str(tmp_path / "no-such-config.yaml"))
    return tmp_path


@pytest.fixture(autouse=True)
def _restore_root_logging():
    """main() installs its own root handlers; drop them after each test."""
    root = logging.getLogger()
    level = root.level
    yield
    for h in root.handlers[:]:
        if type(h) in (logging.StreamHandler, logging.FileHandler):
            root.removeHandler(h)
            h.close()
    root.setLevel(level)


@pytest.fixture
def db_path(tmp_workdir):
    return str(tmp_workdir / "data" / "fdb.jsonl")


@pytest.fixture
def store(db_path):
    return FrecencyStore(path=db_path, history_limit=600, lock_timeout=2.0)


@pytest.fixture
def engine(store):
    return FrecencyEngine(store, clock=lambda: NOW)
