"""Version subcommand: version, Python and dependency versions."""
from __future__ import annotations

import json
import sys
from importlib import metadata

from core.theme import theme as _theme

DEPENDENCIES = ("filelock", "PyYAML", "rich")


def _dependency_versions() -> dict[str, str]:
    deps: dict[str, str] = {}
    for dist in DEPENDENCIES:
        try:
            deps[dist] = metadata.version(dist)
        except metadata.PackageNotFoundError:
            deps[dist] = "not installed"
    return deps


def cmd_version(json_output: bool = False, db_path: str = "", console=None) -> int:
    """Show version, Python version, key dependency versions and the database in use."""
    from cli.helpers import PROJECT_ROOT, get_version

    version = get_version()
    py_version = f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}"
    deps = _dependency_versions()

    if json_output:
        info = {
            "version": version,
            "python": py_version,
            "db_path": db_path,
            "dependencies": deps,
            "install_path": PROJECT_ROOT,
        }
        print(json.dumps(info, indent=2))
        return 0

    from rich.console import Console
    from rich.markup import escape
    from rich.table import Table
    console = console or Console(no_color=_theme.no_color)

    console.print(f"\n  {_theme.styled(_theme.heading, 'fdb')}  v{version}")
    console.print(f"  {_theme.styled(_theme.muted, 'Python:')}    {py_version}")
    console.print(f"  {_theme.styled(_theme.muted, 'Database:')}  {escape(db_path)}")
    console.print(f"  {_theme.styled(_theme.muted, 'Path:')}      {escape(PROJECT_ROOT)}")

    table = Table(show_header=True, header_style=_theme.heading or None,
                  box=None, padding=(0, 2))
    table.add_column("Package", style=_theme.muted or None)
    table.add_column("Version")
    for pkg, ver in deps.items():
        style = _theme.success if ver != "not installed" else _theme.error
        table.add_row(pkg, _theme.styled(style, ver))
    console.print()
    console.print(table)
    console.print()
    return 0
