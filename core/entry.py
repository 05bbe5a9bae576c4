"""
core/entry.py
Visit record + frecency scoring.
The same score() drives both query ranking and store eviction.
"""

from __future__ import annotations
import math
from dataclasses import dataclass

# score = hits / (BASE_WEIGHT + DECAY_PER_SECOND * age)
BASE_WEIGHT = 0.25
DECAY_PER_SECOND = 3e-6

SORT_METHODS = ("frecency", "atime", "hits")

# Persisted hits/atime must fit a signed 64-bit value
MAX_FIELD = 2 ** 63 - 1


@dataclass
class Entry:
    path:        str
    hits:        int = 1
    last_access: int = 0   # unix seconds

    def touch(self, now: int):
        self.hits += 1
        self.last_access = now

    def to_dict(self) -> dict:
        return {
            "path":  self.path,
            "hits":  self.hits,
            "atime": self.last_access,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "Entry":
        """Strict parse of one persisted record. Raises ValueError/TypeError/KeyError."""
        path = d["path"]
        hits = d["hits"]
        atime = d["atime"]
        if not isinstance(path, str) or not path:
            raise ValueError("path must be a non-empty string")
        # bool is an int subclass; reject it explicitly
        if isinstance(hits, bool) or not isinstance(hits, int):
            raise TypeError("hits must be an int")
        if isinstance(atime, bool) or not isinstance(atime, (int, float)):
            raise TypeError("atime must be a number")
        if isinstance(atime, float) and not math.isfinite(atime):
            raise ValueError(f"atime must be finite, got {atime}")
        if not 1 <= hits <= MAX_FIELD:
            raise ValueError(f"hits out of range: {hits}")
        if not -MAX_FIELD <= atime <= MAX_FIELD:
            raise ValueError(f"atime out of range: {atime}")
        return cls(path=path, hits=hits, last_access=int(atime))


def age(entry: Entry, now: int) -> int:
    """Seconds since the last visit. Never negative (clock skew clamps to 0)."""
    return max(0, now - entry.last_access)


def score(entry: Entry, now: int) -> float:
    return entry.hits / (BASE_WEIGHT + DECAY_PER_SECOND * age(entry, now))


def rank_key(entry: Entry, now: int, sort_by: str = "frecency") -> tuple:
    """
    Ascending sort key: best entry first.
    frecency: score desc, then last_access desc, then path asc.
    atime / hits put their own field in front of the frecency key.
    """
    frecency_key = (-score(entry, now), -entry.last_access, entry.path)
    if sort_by == "atime":
        return (-entry.last_access,) + frecency_key
    if sort_by == "hits":
        return (-entry.hits,) + frecency_key
    return frecency_key


def eviction_key(entry: Entry, now: int) -> tuple:
    """Ascending: the first entry is the one to evict."""
    return (score(entry, now), entry.last_access, entry.path)
