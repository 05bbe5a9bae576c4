"""Query command: ranked paths on stdout, one per line."""
from __future__ import annotations

import os
import sys

from core.engine import FrecencyEngine


def cmd_query(engine: FrecencyEngine, patterns: list[str],
              sort_by: str = "frecency", match: str = "substring") -> int:
    """
    Print matching paths, best first.
    The shell side usually keeps only the first line (`fdb query foo | head -n 1`),
    so a closed pipe ends the listing quietly.
    """
    out = sys.stdout
    try:
        for path in engine.query(patterns, sort_by=sort_by, match=match):
            out.write(path + "\n")
        out.flush()
    except BrokenPipeError:
        # Point stdout at devnull so the interpreter's final flush can't fail again
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, out.fileno())
    return 0
