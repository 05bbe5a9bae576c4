"""List command: ranked entries with hits, last access and score."""
from __future__ import annotations

import time

from core.engine import FrecencyEngine
from core.theme import theme as _theme


def _format_age(seconds: int) -> str:
    if seconds < 60:
        return f"{seconds}s ago"
    if seconds < 3600:
        return f"{seconds // 60}m ago"
    if seconds < 86400:
        return f"{seconds // 3600}h ago"
    return f"{seconds // 86400}d ago"


def cmd_list(engine: FrecencyEngine, patterns: list[str],
             sort_by: str = "frecency", match: str = "substring",
             console=None) -> int:
    """Show matching entries as a table, best first."""
    from rich.console import Console
    from rich.markup import escape
    from rich.table import Table

    console = console or Console(no_color=_theme.no_color)
    now = int(time.time())
    ranked = engine.rank(patterns, now=now, sort_by=sort_by, match=match)

    if not ranked:
        console.print(_theme.styled(_theme.muted, "  No matching entries."))
        return 0

    tbl = Table(box=None, padding=(0, 1), show_header=True,
                header_style=_theme.heading or None)
    tbl.add_column("#", justify="right", style=_theme.muted or None)
    tbl.add_column("Path", style=_theme.path or None, overflow="fold")
    tbl.add_column("Hits", justify="right", style=_theme.hits or None)
    tbl.add_column("Last access", justify="right")
    tbl.add_column("Score", justify="right", style=_theme.score or None)
    for i, (entry, value) in enumerate(ranked, 1):
        tbl.add_row(
            str(i),
            escape(entry.path),
            str(entry.hits),
            _format_age(max(0, now - entry.last_access)),
            f"{value:.2f}",
        )
    console.print(tbl)
    console.print(_theme.styled(
        _theme.muted,
        f"  {len(ranked)} entr{'y' if len(ranked) == 1 else 'ies'} · "
        f"sorted by {sort_by} · {escape(engine.store.path)}"))
    return 0
