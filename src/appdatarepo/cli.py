"""Command-line interface for appdatarepo: parse appdata files, scan metadata directories, show relations."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from appdatarepo.api import default_rootdir, record_tree
from appdatarepo.core.deps import application_name
from appdatarepo.core.finder import add_appdata_dir
from appdatarepo.core.flags import IngestFlags
from appdatarepo.core.parser import add_appdata
from appdatarepo.core.store import KEY_CATEGORY, KEY_DESCRIPTION, KEY_SUMMARY, PackageStore, Record
from appdatarepo.core.tree import CYCLE, NOT_FOUND, RelationNode
from appdatarepo.errors import AppdataParseError
from appdatarepo.logging_config import setup_logging

logger = logging.getLogger(__name__)


def _print_record(rec: Record, *, long: bool = False, relations_only: bool = False) -> None:
    """Print one record as indented text."""
    print(f"{rec.name or '(unnamed)'}")
    if not relations_only:
        category = rec.get(KEY_CATEGORY)
        summary = rec.get(KEY_SUMMARY)
        if category:
            print(f"  category: {category}")
        if summary:
            print(f"  summary:  {summary}")
        if long and rec.get(KEY_DESCRIPTION):
            print("  description:")
            for line in str(rec.get(KEY_DESCRIPTION)).split("\n"):
                print(f"    {line}" if line else "")
    for label, relations in (("requires", rec.requires), ("provides", rec.provides)):
        if relations:
            print(f"  {label}:")
            for rel in relations:
                print(f"    {rel}")


def _print_tree_text(node: RelationNode, prefix: str = "") -> None:
    """Print a relation tree as indented text."""
    marker = "├── " if prefix else ""
    version = f" ({node.version})" if node.version else ""
    via = f" <- {node.requirement}" if node.requirement and prefix else ""
    if node.summary in (NOT_FOUND, CYCLE):
        desc = f" [{node.summary}]"
    else:
        desc = f" - {node.summary}" if node.summary else ""
    print(f"{prefix}{marker}{node.name}{version}{desc}{via}")
    for i, child in enumerate(node.children):
        is_last = i == len(node.children) - 1
        child_prefix = (prefix + ("    " if is_last else "│   ")) if prefix else "  "
        _print_tree_text(child, child_prefix)


def _flags_and_store(args: argparse.Namespace) -> tuple[IngestFlags, PackageStore]:
    flags = IngestFlags.NONE
    if getattr(args, "check_desktop", False):
        flags |= IngestFlags.CHECK_DESKTOP_FILE
    root = getattr(args, "root", None) or default_rootdir()
    if root:
        flags |= IngestFlags.USE_ROOTDIR
    return flags, PackageStore(rootdir=root)


def _host_path(raw: str, flags: IngestFlags, store: PackageStore) -> Path:
    """Where a command-line path lives on the host; under the root directory when one is set."""
    if flags & IngestFlags.USE_ROOTDIR:
        return Path(store.prepend_rootdir(raw))
    return Path(raw)


def _ingest_paths(
    paths: list[str], flags: IngestFlags, store: PackageStore
) -> tuple[list[int], list[dict]]:
    """Ingest files and directories into ``store``; return handles and error dicts."""
    handles: list[int] = []
    errors: list[dict] = []
    for raw in paths:
        path = _host_path(raw, flags, store)
        logger.info("Ingesting %s", path)
        if path.is_dir():
            # add_appdata_dir applies the root prefix itself
            result = add_appdata_dir(store, raw, flags | IngestFlags.NO_INTERNALIZE)
            handles.extend(result.handles)
            errors.extend(e.to_dict() for e in result.errors)
            continue
        try:
            with open(path, "rb") as fp:
                handles.extend(
                    add_appdata(store, fp, flags | IngestFlags.NO_INTERNALIZE, filename=path.name)
                )
        except AppdataParseError as e:
            errors.append({"path": str(path), **e.to_dict()})
        except OSError as e:
            errors.append({"path": str(path), "message": e.strerror or str(e), "line": None, "column": None})
    store.internalize()
    return handles, errors


def _report_errors(errors: list[dict]) -> None:
    for err in errors:
        where = f" at line {err['line']}:{err['column']}" if err.get("line") is not None else ""
        print(f"Error: {err['path']}: {err['message']}{where}", file=sys.stderr)


def cmd_parse(args: argparse.Namespace) -> int:
    """Parse appdata files and print the resulting records."""
    flags, store = _flags_and_store(args)
    handles, errors = _ingest_paths(args.files, flags, store)
    records = [store.record(h) for h in handles if h in store]

    if args.json:
        print(json.dumps({"records": [r.to_dict() for r in records], "errors": errors}, indent=2))
    else:
        for rec in records:
            _print_record(rec, long=args.long)
            print()
    _report_errors(errors)
    return 1 if errors else 0


def cmd_scan(args: argparse.Namespace) -> int:
    """Ingest a metadata directory; unreadable or malformed files are reported, not fatal."""
    flags, store = _flags_and_store(args)
    directory = _host_path(args.directory, flags, store)
    if not directory.is_dir():
        print(f"Not a directory: {directory}", file=sys.stderr)
        return 1
    result = add_appdata_dir(store, args.directory, flags)
    records = [store.record(h) for h in result.handles if h in store]

    if args.json:
        print(
            json.dumps(
                {
                    "records": [r.to_dict() for r in records],
                    "errors": [e.to_dict() for e in result.errors],
                },
                indent=2,
            )
        )
    else:
        print(f"Found {len(result.documents)} document(s), {len(records)} record(s):\n")
        for rec in records:
            _print_record(rec, long=args.long)
            print()
    _report_errors([e.to_dict() for e in result.errors])
    return 0


def cmd_deps(args: argparse.Namespace) -> int:
    """Show the requires/provides relations synthesized for each record."""
    flags, store = _flags_and_store(args)
    handles, errors = _ingest_paths(args.paths, flags, store)
    records = [store.record(h) for h in handles if h in store]

    if args.json:
        print(
            json.dumps(
                {
                    rec.name or f"#{rec.handle}": {
                        "requires": [str(r) for r in rec.requires],
                        "provides": [str(p) for p in rec.provides],
                    }
                    for rec in records
                },
                indent=2,
            )
        )
    else:
        for rec in records:
            _print_record(rec, relations_only=True)
    _report_errors(errors)
    return 1 if errors else 0


def cmd_tree(args: argparse.Namespace) -> int:
    """Show which records satisfy the requires of one record."""
    flags, store = _flags_and_store(args)
    _handles, errors = _ingest_paths(args.paths, flags, store)
    _report_errors(errors)

    tree = record_tree(store, args.name, max_depth=args.depth)
    if tree is None:
        tree = record_tree(store, application_name(args.name), max_depth=args.depth)
    if tree is None:
        print(f"Record not found: {args.name}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(tree.to_dict(), indent=2))
    else:
        _print_tree_text(tree)
    return 0


def cmd_tui(args: argparse.Namespace) -> int:
    """Launch the interactive TUI."""
    from appdatarepo.tui.app import AppdataBrowserApp

    app = AppdataBrowserApp(directory=getattr(args, "directory", None))
    app.run()
    return 0


def _add_ingest_options(parser: argparse.ArgumentParser, *, desktop_option: bool = True) -> None:
    if desktop_option:
        parser.add_argument(
            "--check-desktop",
            action="store_true",
            help="Fill missing name/summary from /usr/share/applications/<id>",
        )
    parser.add_argument(
        "--root",
        metavar="PATH",
        default=None,
        help="Root directory; path arguments and .desktop lookups are resolved under it (default: $APPDATAREPO_ROOTDIR)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the appdatarepo CLI."""
    parser = argparse.ArgumentParser(
        prog="appdatarepo",
        description="Turn AppData/AppStream metadata into package records.",
    )
    parser.add_argument("--version", action="version", version="%(prog)s 0.1.0")
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="More log output (-v info, -vv debug)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # appdatarepo parse
    parse_parser = subparsers.add_parser(
        "parse",
        help="Parse appdata files and print records",
        description="Parse one or more *.appdata.xml / *.metainfo.xml files.",
    )
    parse_parser.add_argument("files", nargs="+", help="Appdata files (or directories) to parse")
    parse_parser.add_argument(
        "-l",
        "--long",
        action="store_true",
        help="Include descriptions",
    )
    _add_ingest_options(parse_parser)
    parse_parser.set_defaults(func=cmd_parse)

    # appdatarepo scan
    scan_parser = subparsers.add_parser(
        "scan",
        help="Ingest a metadata directory",
        description=(
            "Ingest every *.appdata.xml and *.metainfo.xml file of a directory. "
            "Files that cannot be read or parsed are reported and skipped."
        ),
    )
    scan_parser.add_argument("directory", help="Directory such as /usr/share/metainfo")
    scan_parser.add_argument(
        "-l",
        "--long",
        action="store_true",
        help="Include descriptions",
    )
    _add_ingest_options(scan_parser, desktop_option=False)
    scan_parser.set_defaults(func=cmd_scan)

    # appdatarepo deps
    deps_parser = subparsers.add_parser(
        "deps",
        help="Show synthesized requires/provides",
        description="Print the requires and provides relations of each record.",
    )
    deps_parser.add_argument("paths", nargs="+", help="Appdata files or directories")
    _add_ingest_options(deps_parser)
    deps_parser.set_defaults(func=cmd_deps)

    # appdatarepo tree
    tree_parser = subparsers.add_parser(
        "tree",
        help="Show the relation tree of a record",
        description="Resolve a record's requires against the providers among the ingested records.",
    )
    tree_parser.add_argument("name", help="Record name, with or without the application: prefix")
    tree_parser.add_argument("paths", nargs="+", help="Appdata files or directories")
    tree_parser.add_argument(
        "-d",
        "--depth",
        type=int,
        default=None,
        help="Maximum tree depth (default: unlimited)",
    )
    _add_ingest_options(tree_parser)
    tree_parser.set_defaults(func=cmd_tree)

    # appdatarepo tui
    tui_parser = subparsers.add_parser(
        "tui",
        help="Launch the interactive terminal UI",
        description="Browse the records of a metadata directory interactively.",
    )
    tui_parser.add_argument(
        "directory",
        nargs="?",
        help="Optional: directory to load on start",
    )
    tui_parser.set_defaults(func=cmd_tui)

    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    if args.command is None:
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
