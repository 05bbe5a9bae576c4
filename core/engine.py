"""
core/engine.py
record / query / delete on top of FrecencyStore.
Every mutation is one critical section: lock → load → mutate → evict → save.
Queries read without the lock and may see a slightly stale snapshot.
"""

from __future__ import annotations
import logging
import os
import re
import time
from typing import Callable, Iterable, Iterator, Optional, Sequence

from core.entry import SORT_METHODS, Entry, rank_key, score
from core.store import FrecencyStore

logger = logging.getLogger(__name__)

MATCH_MODES = ("substring", "regex")


class InvalidPathError(ValueError):
    """Raised for record/delete paths that are not absolute."""
    pass


def normalize_path(path: str) -> str:
    """Reject relative paths; collapse trailing slashes and `.`/`..` parts."""
    if not path or not os.path.isabs(path):
        raise InvalidPathError(f"Path must be absolute: {path!r}")
    return os.path.normpath(path)


def matches(path: str, patterns: Sequence[str]) -> bool:
    """Every pattern must occur somewhere in path, in any order."""
    return all(p in path for p in patterns)


def _compile_regex(patterns: Sequence[str]) -> Optional[re.Pattern]:
    # Ordered match, as `fdb -q a b` → a.*b
    if not patterns:
        return None
    return re.compile(".*".join(patterns))


class FrecencyEngine:
    """
    The three shell-facing operations.
    `clock` returns unix seconds; every public method also accepts an
    explicit `now` so scoring is deterministic under test.
    """

    def __init__(self, store: FrecencyStore,
                 clock: Callable[[], float] = time.time):
        self.store = store
        self.clock = clock

    def _now(self, now: Optional[int]) -> int:
        return int(self.clock()) if now is None else int(now)

    # ── Record ───────────────────────────────────────────────────────────────

    def record(self, path: str, now: Optional[int] = None) -> Entry:
        """Count one visit to `path`. Not idempotent: every call adds a hit."""
        return self.record_many([path], now=now)[0]

    def record_many(self, paths: Iterable[str],
                    now: Optional[int] = None) -> list[Entry]:
        # Validate everything before touching the store
        normalized = [normalize_path(p) for p in paths]
        now = self._now(now)
        recorded: list[Entry] = []

        with self.store.exclusive_access():
            entries = self.store.load()
            for path in normalized:
                entry = entries.get(path)
                if entry is None:
                    entry = Entry(path=path, hits=1, last_access=now)
                    entries[path] = entry
                else:
                    entry.touch(now)
                recorded.append(entry)
            evicted = self.store.evict(entries, now)
            self.store.save(entries)

        if evicted:
            logger.info("Evicted %d entr%s over history limit %s",
                        len(evicted), "y" if len(evicted) == 1 else "ies",
                        self.store.history_limit)
        return recorded

    # ── Delete ───────────────────────────────────────────────────────────────

    def delete(self, path: str, now: Optional[int] = None) -> bool:
        """Remove `path` if present. Absent path is a no-op returning False."""
        return self.delete_many([path], now=now) > 0

    def delete_many(self, paths: Iterable[str],
                    now: Optional[int] = None) -> int:
        paths = list(paths)
        normalized = [normalize_path(p) for p in paths]
        removed = 0

        with self.store.exclusive_access():
            entries = self.store.load()
            for raw, path in zip(paths, normalized):
                # Hand-edited files may hold unnormalized paths; match those verbatim
                if entries.pop(path, None) is not None or entries.pop(raw, None) is not None:
                    removed += 1
            # Nothing removed → leave the file alone
            if removed:
                self.store.evict(entries, self._now(now))
                self.store.save(entries)

        logger.debug("Deleted %d of %d path(s)", removed, len(normalized))
        return removed

    # ── Query ────────────────────────────────────────────────────────────────

    def rank(self, patterns: Sequence[str] = (), now: Optional[int] = None,
             sort_by: str = "frecency",
             match: str = "substring") -> list[tuple[Entry, float]]:
        """Matching entries with their scores, best first."""
        if sort_by not in SORT_METHODS:
            raise ValueError(f"Unknown sort method: {sort_by}")
        if match not in MATCH_MODES:
            raise ValueError(f"Unknown match mode: {match}")
        now = self._now(now)
        patterns = list(patterns)

        if match == "regex":
            regex = _compile_regex(patterns)
            candidates = [e for e in self.store.load().values()
                          if regex is None or regex.search(e.path)]
        else:
            candidates = [e for e in self.store.load().values()
                          if matches(e.path, patterns)]

        candidates.sort(key=lambda e: rank_key(e, now, sort_by))
        return [(e, score(e, now)) for e in candidates]

    def query(self, patterns: Sequence[str] = (), now: Optional[int] = None,
              sort_by: str = "frecency",
              match: str = "substring") -> Iterator[str]:
        """
        Lazily yield matching paths, most frecent first.
        Empty `patterns` lists everything; no match yields nothing.
        """
        ranked = self.rank(patterns, now=now, sort_by=sort_by, match=match)
        return (entry.path for entry, _ in ranked)

    # ── Init ─────────────────────────────────────────────────────────────────

    def init(self):
        """Write an empty database, replacing any existing one."""
        with self.store.exclusive_access():
            self.store.save({})
        logger.info("Initialized empty database at %s", self.store.path)
