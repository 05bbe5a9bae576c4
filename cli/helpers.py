"""Shared utilities for CLI modules."""
from __future__ import annotations

import os
import sys
import tomllib

from core.config import Settings
from core.engine import FrecencyEngine
from core.store import FrecencyStore

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def get_version() -> str:
    """Read version from pyproject.toml, fallback to '0.1.0'."""
    pyproject = os.path.join(PROJECT_ROOT, "pyproject.toml")
    try:
        with open(pyproject, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError):
        return "0.1.0"
    return data.get("project", {}).get("version", "0.1.0")


def build_engine(settings: Settings) -> FrecencyEngine:
    store = FrecencyStore(
        path=settings.db_path,
        history_limit=settings.history_size,
        lock_timeout=settings.lock_timeout,
    )
    return FrecencyEngine(store)


def error(message: str):
    """Print `fdb: message` on stderr."""
    print(f"fdb: {message}", file=sys.stderr)
