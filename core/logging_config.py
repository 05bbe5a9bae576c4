"""
core/logging_config.py
Logging setup for fdb invocations.
Console (stderr) gets warnings only by default so shell hooks stay quiet;
an optional log file can take plain or JSON lines.
"""

from __future__ import annotations
import json
import logging
import os
import time
from typing import Optional

logger = logging.getLogger(__name__)

# ── Structured JSON Formatter ─────────────────────────────────────────────

class StructuredFormatter(logging.Formatter):
    """
    JSON log formatter for machine-parseable logs.
    Fields: ts, level, logger, msg, pid, extra
    """

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(record.created)),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            # Many shells write concurrently; pid tells invocations apart
            "pid": record.process,
        }

        if hasattr(record, "extra_data"):
            entry["extra"] = record.extra_data

        if record.exc_info and record.exc_info[0]:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, ensure_ascii=False, default=str)


# ── Setup ─────────────────────────────────────────────────────────────────

def setup_logging(level: str = "WARNING", log_file: Optional[str] = None,
                  structured: bool = False):
    """
    Configure root logging.
    Args:
        level: log level (DEBUG/INFO/WARNING/ERROR)
        log_file: optional path; parent directory is created
        structured: if True, the log file gets JSON lines
    """
    numeric = getattr(logging, level.upper(), logging.WARNING)

    root = logging.getLogger()
    root.setLevel(numeric)

    # Remove existing handlers
    for h in root.handlers[:]:
        root.removeHandler(h)

    console = logging.StreamHandler()
    console.setFormatter(logging.Formatter("fdb[%(name)s]: %(message)s"))
    console.setLevel(numeric)
    root.addHandler(console)

    if log_file:
        log_file = os.path.expanduser(log_file)
        try:
            os.makedirs(os.path.dirname(log_file) or ".", exist_ok=True)
            file_handler = logging.FileHandler(log_file, encoding="utf-8")
        except OSError as e:
            # A broken log setting must not stop the prompt hook
            logger.warning("Can't open log file %s: %s, logging to stderr only",
                           log_file, e)
            return root
        if structured:
            formatter = StructuredFormatter()
        else:
            formatter = logging.Formatter(
                "[%(asctime)s][%(process)d][%(name)s][%(levelname)s] %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        file_handler.setFormatter(formatter)
        file_handler.setLevel(numeric)
        root.addHandler(file_handler)

    return root
