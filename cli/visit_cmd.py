"""Mutating commands: add (record visits), delete, init."""
from __future__ import annotations

import logging

from core.engine import FrecencyEngine

logger = logging.getLogger(__name__)


def cmd_add(engine: FrecencyEngine, paths: list[str]) -> int:
    """Record one visit per path. Called from the shell's prompt hook."""
    recorded = engine.record_many(paths)
    for entry in recorded:
        logger.debug("Recorded %s (hits=%d)", entry.path, entry.hits)
    return 0


def cmd_delete(engine: FrecencyEngine, paths: list[str]) -> int:
    """Forget paths, typically ones that no longer exist on disk."""
    removed = engine.delete_many(paths)
    if not removed:
        logger.debug("Nothing to delete for %s", paths)
    return 0


def cmd_init(engine: FrecencyEngine) -> int:
    engine.init()
    return 0
