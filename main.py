#!/usr/bin/env python3
"""
main.py: fdb CLI
Usage:
  fdb add PATH...              # record a visit (shell prompt hook: fdb add "$PWD")
  fdb query [PATTERN...]       # ranked matching paths, best first
  fdb delete PATH...           # forget paths (e.g. directories that are gone)
  fdb list [PATTERN...]        # ranked table with hits, last access, score
  fdb init                     # write an empty database
  fdb version [--json]         # version info

Global options (before the command):
  -i, --db-path DB_PATH        # database file (default: $FDB_DB_PATH or ~/.z)
  -u, --unlimited              # don't bound the database size for this call
  -s, --sort-by METHOD         # frecency | atime | hits (query/list)

Environment:
  FDB_DB_PATH, FDB_HISTORY_SIZE (default 600), FDB_LOCK_TIMEOUT,
  FDB_CONFIG, FDB_LOG_LEVEL, FDB_LOG_FILE, FDB_LOG_FORMAT=json
"""

import argparse
import sys

from core.config import resolve_settings
from core.entry import SORT_METHODS
from core.logging_config import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fdb", description="Frecency-ranked directory database.")
    parser.add_argument("-i", "--db-path", default=None, metavar="DB_PATH",
                        help="Use the given database")
    parser.add_argument("-u", "--unlimited", action="store_true",
                        help="Don't limit the size of the database")
    parser.add_argument("-s", "--sort-by", default=None, choices=SORT_METHODS,
                        help="Sort method for query/list")
    sub = parser.add_subparsers(dest="cmd")

    p_add = sub.add_parser("add", help="Record visits to absolute paths")
    p_add.add_argument("paths", nargs="+", metavar="PATH")

    p_query = sub.add_parser("query", help="Print matching paths, best first")
    p_query.add_argument("patterns", nargs="*", metavar="PATTERN")
    p_query.add_argument("--regex", action="store_true",
                         help="Treat patterns as an ordered regex (a.*b)")

    p_del = sub.add_parser("delete", help="Remove paths from the database")
    p_del.add_argument("paths", nargs="+", metavar="PATH")

    p_list = sub.add_parser("list", help="Show ranked entries as a table")
    p_list.add_argument("patterns", nargs="*", metavar="PATTERN")
    p_list.add_argument("--regex", action="store_true",
                        help="Treat patterns as an ordered regex (a.*b)")

    sub.add_parser("init", help="Initialize an empty database")

    p_ver = sub.add_parser("version", help="Show version info")
    p_ver.add_argument("--json", action="store_true", help="JSON output")

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.cmd is None:
        parser.print_help()
        return 2

    settings = resolve_settings(db_path=args.db_path, unlimited=args.unlimited,
                                sort_by=args.sort_by)
    setup_logging(level=settings.log_level, log_file=settings.log_file,
                  structured=settings.log_format == "json")

    from cli import dispatch_command
    return dispatch_command(args, settings)


if __name__ == "__main__":
    sys.exit(main())
