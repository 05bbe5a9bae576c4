"""
core/theme.py
Semantic colors for fdb's human-readable output (list, version).

Supports:
  - NO_COLOR=1 → disable all colors
  - FDB_THEME=minimal → fewer colors

Usage:
    from core.theme import theme
    console.print(f"[{theme.path}]/home/me[/{theme.path}]")
"""

from __future__ import annotations

import os

_STYLE_NAMES = ("heading", "path", "hits", "score", "muted",
                "success", "warning", "error")


class Theme:
    """Semantic color definitions for consistent CLI appearance."""

    def __init__(self, env=None):
        env = os.environ if env is None else env
        self.no_color = bool(env.get("NO_COLOR"))
        self.name = env.get("FDB_THEME", "default")

        if self.no_color:
            self._apply_no_color()
        elif self.name == "minimal":
            self._apply_minimal()
        else:
            self._apply_default()

    def _apply_default(self):
        self.heading = "bold"
        self.path = "bold cyan"
        self.hits = "magenta"
        self.score = "green"
        self.muted = "dim"
        self.success = "green"
        self.warning = "yellow"
        self.error = "red"

    def _apply_minimal(self):
        self.heading = "bold"
        self.path = "bold"
        self.hits = ""
        self.score = ""
        self.muted = "dim"
        self.success = "green"
        self.warning = "yellow"
        self.error = "red"

    def _apply_no_color(self):
        for attr in _STYLE_NAMES:
            setattr(self, attr, "")

    def styled(self, style: str, text: str) -> str:
        """Wrap text in rich markup, or return it untouched for empty styles."""
        if not style:
            return text
        return f"[{style}]{text}[/{style}]"


theme = Theme()
