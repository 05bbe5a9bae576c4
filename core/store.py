"""
core/store.py
File-backed frecency store.
One JSON object per line: {"path": ..., "hits": ..., "atime": ...}.
Writers hold a FileLock on <db>.lock for the whole load → mutate → save cycle;
saves go through a temp file + os.replace so readers never see a partial file.
"""

from __future__ import annotations
import json
import logging
import os
import stat
import tempfile
from contextlib import contextmanager
from typing import Iterable, Iterator, Optional

from filelock import FileLock, Timeout

from core.entry import Entry, eviction_key

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = "~/.z"
DEFAULT_HISTORY_SIZE = 600
DEFAULT_LOCK_TIMEOUT = 5.0   # seconds


class StoreError(Exception):
    """Raised when the database cannot be read (permission) or written."""
    pass


class StoreLockTimeout(StoreError):
    """Raised when the exclusive lock is not acquired within the timeout."""
    pass


def iter_entries(lines: Iterable[bytes]) -> Iterator[Entry]:
    """
    Parse persisted lines, yielding good records.
    Blank, undecodable or malformed lines are dropped; parsing keeps going.
    """
    for lineno, raw in enumerate(lines, 1):
        try:
            line = raw.decode("utf-8").strip()
        except UnicodeDecodeError:
            logger.debug("Skipping undecodable line %d", lineno)
            continue
        if not line:
            continue
        try:
            record = json.loads(line)
            if not isinstance(record, dict):
                raise TypeError("record must be an object")
            yield Entry.from_dict(record)
        except (json.JSONDecodeError, KeyError, TypeError, ValueError,
                OverflowError) as e:
            logger.debug("Skipping corrupt line %d: %s", lineno, e)
            continue


def evict(entries: dict[str, Entry], limit: Optional[int],
          now: int) -> list[Entry]:
    """
    Drop lowest-scoring entries until len(entries) <= limit.
    Ties go to the oldest last_access, then path. limit 0/None = unbounded.
    """
    if not limit or len(entries) <= limit:
        return []
    overflow = len(entries) - limit
    doomed = sorted(entries.values(), key=lambda e: eviction_key(e, now))[:overflow]
    for entry in doomed:
        del entries[entry.path]
        logger.debug("Evicted %s (hits=%d, atime=%d)",
                     entry.path, entry.hits, entry.last_access)
    return doomed


class FrecencyStore:
    """
    Process-safe entry store.
    load() never takes the lock; mutating callers wrap
    load/evict/save in exclusive_access().
    """

    def __init__(self, path: str = DEFAULT_DB_PATH,
                 history_limit: Optional[int] = DEFAULT_HISTORY_SIZE,
                 lock_timeout: float = DEFAULT_LOCK_TIMEOUT):
        self.path = os.path.expanduser(path)
        self.history_limit = history_limit
        self.lock_path = self.path + ".lock"
        self.lock = FileLock(self.lock_path, timeout=lock_timeout)

    # ── Locking ──────────────────────────────────────────────────────────────

    @contextmanager
    def exclusive_access(self):
        """Hold the writer lock for the duration of the block."""
        try:
            os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
        except OSError as e:
            raise StoreError(f"Can't create database directory: {e}") from e
        try:
            self.lock.acquire()
        except Timeout as e:
            raise StoreLockTimeout(
                f"Timed out after {self.lock.timeout}s waiting for {self.lock_path}"
            ) from e
        except OSError as e:
            raise StoreError(f"Can't lock database: {e}") from e
        try:
            yield self
        finally:
            self.lock.release()

    # ── Read ─────────────────────────────────────────────────────────────────

    def load(self) -> dict[str, Entry]:
        """
        Read all entries. Missing or unreadable files give an empty store;
        only a permission error on the configured path is raised.
        """
        try:
            with open(self.path, "rb") as f:
                return self._merge(iter_entries(f))
        except FileNotFoundError:
            return {}
        except PermissionError as e:
            raise StoreError(f"Can't read database {self.path}: {e}") from e
        except OSError as e:
            logger.warning("Ignoring unreadable database %s: %s", self.path, e)
            return {}

    @staticmethod
    def _merge(entries: Iterable[Entry]) -> dict[str, Entry]:
        # Duplicate paths: keep the record with more hits, then the newer one
        merged: dict[str, Entry] = {}
        for entry in entries:
            seen = merged.get(entry.path)
            if seen is None or (entry.hits, entry.last_access) > (seen.hits, seen.last_access):
                merged[entry.path] = entry
        return merged

    # ── Write ────────────────────────────────────────────────────────────────

    def save(self, entries: dict[str, Entry]):
        """Atomically replace the database with `entries` (sorted by path)."""
        directory = os.path.dirname(self.path) or "."
        tmp_path = None
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=directory, prefix=os.path.basename(self.path) + ".",
                suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                for path in sorted(entries):
                    # ensure_ascii keeps surrogate-escaped paths encodable
                    f.write(json.dumps(entries[path].to_dict()) + "\n")
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_path, self._file_mode())
            os.replace(tmp_path, self.path)
            tmp_path = None
        except OSError as e:
            raise StoreError(f"Can't save database {self.path}: {e}") from e
        finally:
            if tmp_path is not None:
                try:
                    os.remove(tmp_path)
                except OSError:
                    logger.debug("Couldn't remove temp file %s", tmp_path)

    def _file_mode(self) -> int:
        """Mode for the replacement file: the existing file's, else 0666 minus umask."""
        try:
            return stat.S_IMODE(os.stat(self.path).st_mode)
        except FileNotFoundError:
            umask = os.umask(0)
            os.umask(umask)
            return 0o666 & ~umask

    # ── Eviction ─────────────────────────────────────────────────────────────

    def evict(self, entries: dict[str, Entry], now: int) -> list[Entry]:
        return evict(entries, self.history_limit, now)
