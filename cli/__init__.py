"""CLI dispatcher: lazy-loads command modules on demand."""
from __future__ import annotations

import logging
import re

from cli.helpers import build_engine, error
from core.config import Settings
from core.engine import InvalidPathError
from core.store import StoreError

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


def dispatch_command(args, settings: Settings) -> int:
    """Route args.cmd to the matching cli module. Returns the exit status."""
    cmd = getattr(args, "cmd", None)
    match = "regex" if getattr(args, "regex", False) else "substring"

    if cmd == "version":
        from cli.version_cmd import cmd_version
        return cmd_version(json_output=getattr(args, "json", False),
                           db_path=settings.db_path)

    engine = build_engine(settings)
    try:
        if cmd == "add":
            from cli.visit_cmd import cmd_add
            return cmd_add(engine, args.paths)

        elif cmd == "delete":
            from cli.visit_cmd import cmd_delete
            return cmd_delete(engine, args.paths)

        elif cmd == "init":
            from cli.visit_cmd import cmd_init
            return cmd_init(engine)

        elif cmd == "query":
            from cli.query_cmd import cmd_query
            return cmd_query(engine, args.patterns,
                             sort_by=settings.sort_by, match=match)

        elif cmd == "list":
            from cli.list_cmd import cmd_list
            return cmd_list(engine, args.patterns,
                            sort_by=settings.sort_by, match=match)

    except InvalidPathError as e:
        error(str(e))
        return EXIT_USAGE
    except re.error as e:
        error(f"Invalid pattern: {e}")
        return EXIT_USAGE
    except StoreError as e:
        # The visit/deletion is lost; the database file is untouched
        logger.debug("Store failure", exc_info=True)
        error(str(e))
        return EXIT_FAILURE

    error(f"Unknown command: {cmd}")
    return EXIT_USAGE
