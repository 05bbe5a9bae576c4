"""
core/config.py
Settings resolution for fdb.

Precedence (lowest → highest):
  built-in defaults → YAML config file → FDB_* environment → CLI flags

YAML file: $FDB_CONFIG, else ~/.config/fdb/config.yaml
  db_path: ~/.z
  history_size: 600
  sort_by: frecency
  lock_timeout: 5
  log_level: WARNING

Bad values never abort: they fall back to the default with a warning.
"""

from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

import yaml

from core.entry import SORT_METHODS
from core.store import DEFAULT_DB_PATH, DEFAULT_HISTORY_SIZE, DEFAULT_LOCK_TIMEOUT

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "~/.config/fdb/config.yaml"
DEFAULT_LOG_LEVEL = "WARNING"

# YAML key → environment variable
ENV_KEYS = {
    "db_path":      "FDB_DB_PATH",
    "history_size": "FDB_HISTORY_SIZE",
    "lock_timeout": "FDB_LOCK_TIMEOUT",
    "sort_by":      "FDB_SORT_BY",
    "log_level":    "FDB_LOG_LEVEL",
    "log_file":     "FDB_LOG_FILE",
    "log_format":   "FDB_LOG_FORMAT",
}


@dataclass
class Settings:
    db_path:      str = DEFAULT_DB_PATH
    history_size: Optional[int] = DEFAULT_HISTORY_SIZE   # None = unlimited
    sort_by:      str = "frecency"
    lock_timeout: float = DEFAULT_LOCK_TIMEOUT
    log_level:    str = DEFAULT_LOG_LEVEL
    log_file:     Optional[str] = None
    log_format:   str = "text"


# ── Value parsing ─────────────────────────────────────────────────────────────

def parse_history_size(raw, default: int = DEFAULT_HISTORY_SIZE) -> int:
    """Positive integer, else `default`."""
    if raw is None or raw == "":
        return default
    try:
        value = int(str(raw).strip())
    except ValueError:
        logger.warning("Invalid history size %r, using %d", raw, default)
        return default
    if value <= 0:
        logger.warning("History size must be positive, got %d, using %d",
                       value, default)
        return default
    return value


def parse_lock_timeout(raw, default: float = DEFAULT_LOCK_TIMEOUT) -> float:
    if raw is None or raw == "":
        return default
    try:
        value = float(str(raw).strip())
    except ValueError:
        logger.warning("Invalid lock timeout %r, using %s", raw, default)
        return default
    if value < 0:
        logger.warning("Lock timeout must be >= 0, got %s, using %s",
                       value, default)
        return default
    return value


def parse_sort_by(raw, default: str = "frecency") -> str:
    if raw is None or raw == "":
        return default
    value = str(raw).strip().lower()
    if value not in SORT_METHODS:
        logger.warning("Unknown sort method %r, using %s", raw, default)
        return default
    return value


# ── Sources ───────────────────────────────────────────────────────────────────

def load_config_file(path: str) -> dict:
    """Read the YAML config. Missing/broken files give {}."""
    path = os.path.expanduser(path)
    if not os.path.exists(path):
        return {}
    try:
        with open(path) as f:
            cfg = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Ignoring config file %s: %s", path, e)
        return {}
    if not isinstance(cfg, dict):
        logger.warning("Ignoring config file %s: top level must be a mapping",
                       path)
        return {}
    return cfg


def _merged_raw(env: Mapping[str, str], file_cfg: dict) -> dict:
    raw = {key: file_cfg.get(key) for key in ENV_KEYS}
    for key, var in ENV_KEYS.items():
        if env.get(var):
            raw[key] = env[var]
    return raw


def resolve_settings(env: Optional[Mapping[str, str]] = None,
                     db_path: Optional[str] = None,
                     unlimited: bool = False,
                     sort_by: Optional[str] = None) -> Settings:
    """
    Build Settings from defaults, config file, environment and CLI flags.
    `env` defaults to os.environ (tests pass a plain dict).
    """
    env = os.environ if env is None else env
    config_path = env.get("FDB_CONFIG") or DEFAULT_CONFIG_PATH
    raw = _merged_raw(env, load_config_file(config_path))

    settings = Settings(
        db_path=str(raw["db_path"] or DEFAULT_DB_PATH),
        history_size=parse_history_size(raw["history_size"]),
        sort_by=parse_sort_by(raw["sort_by"]),
        lock_timeout=parse_lock_timeout(raw["lock_timeout"]),
        log_level=str(raw["log_level"] or DEFAULT_LOG_LEVEL).upper(),
        log_file=raw["log_file"] or None,
        log_format=str(raw["log_format"] or "text").lower(),
    )

    # CLI flags win
    if db_path:
        settings.db_path = db_path
    if sort_by:
        settings.sort_by = parse_sort_by(sort_by)
    if unlimited:
        settings.history_size = None

    settings.db_path = os.path.expanduser(settings.db_path)
    return settings
