"""CLI for deckhand - note type and media maintenance for a collection."""

import argparse
import json
import platform
import sys
from pathlib import Path
from typing import Any

from . import __version__
from .core.errors import DeckhandError
from .core.model import Notetype, OrdinalMode
from .core.operations import delete_media, save_notetype
from .media.check import check_media, format_report
from .runtime import build_runtime


def _load_notetype(rt: Any, notetype_id: int) -> Notetype | None:
    notetype = rt.col.get_notetype_by_id(notetype_id)
    if notetype is None:
        print(f"Note type {notetype_id} not found", file=sys.stderr)
    return notetype


def cmd_notetype_ls(args: argparse.Namespace, rt: Any) -> int:
    """List note types."""
    notetypes = rt.col.all_notetypes()
    if args.json:
        print(json.dumps(
            [{"id": nt.id, "name": nt.name, "templates": len(nt.tmpls)} for nt in notetypes],
            indent=2,
        ))
        return 0
    for nt in notetypes:
        print(f"{nt.id}\t{nt.name or ''}\t{len(nt.tmpls)}")
    return 0


def cmd_notetype_show(args: argparse.Namespace, rt: Any) -> int:
    """Print a note type as JSON."""
    notetype = _load_notetype(rt, args.id)
    if notetype is None:
        return 1
    print(json.dumps(notetype.to_dict(), indent=2, ensure_ascii=False))
    return 0


def cmd_notetype_get(args: argparse.Namespace, rt: Any) -> int:
    """Print one string value of a note type."""
    notetype = _load_notetype(rt, args.id)
    if notetype is None:
        return 1
    value = notetype.get_str_or_none(args.key)
    if value is None:
        if not args.quiet:
            print(f"No string value for {args.key}", file=sys.stderr)
        return 1
    print(value)
    return 0


def cmd_notetype_export(args: argparse.Namespace, rt: Any) -> int:
    """Write a note type as an editable YAML file."""
    notetype = _load_notetype(rt, args.id)
    if notetype is None:
        return 1
    text = rt.codec.encode(notetype)
    if args.out:
        Path(args.out).write_text(text, encoding="utf-8")
        if not args.quiet:
            print(f"Wrote {args.out}")
    else:
        sys.stdout.write(text)
    return 0


def cmd_notetype_import(args: argparse.Namespace, rt: Any) -> int:
    """Add a new note type from a YAML file."""
    text = Path(args.file).read_text(encoding="utf-8")
    notetype, changes = rt.codec.decode(text, require_id=False)
    if changes:
        print("Error: a new note type cannot carry template changes", file=sys.stderr)
        return 1
    if notetype.get("id") and rt.col.get_notetype_by_id(notetype.id) is not None:
        print(f"Error: note type {notetype.id} already exists", file=sys.stderr)
        return 1
    nid = rt.col.add_notetype(notetype)
    if not args.quiet:
        print(nid)
    return 0


def cmd_notetype_save(args: argparse.Namespace, rt: Any) -> int:
    """Apply an edited note type file with its template changes."""
    notetype, changes = rt.codec.decode(Path(args.file).read_text(encoding="utf-8"))
    ordinals = OrdinalMode(args.ordinals) if args.ordinals else rt.config.templates.ordinals

    save_notetype(rt.col, notetype, changes, ordinals=ordinals)

    if not args.quiet:
        saved = rt.col.get_notetype_by_id(notetype.id)
        print(f"Saved note type {notetype.id} ({len(changes)} template change(s), "
              f"{len(saved.tmpls)} template(s))")
    return 0


def cmd_media_ls(args: argparse.Namespace, rt: Any) -> int:
    """List files in the media folder."""
    names = list(rt.col.list_media())
    if args.json:
        print(json.dumps(names, indent=2))
        return 0
    for name in names:
        print(name)
    return 0


def cmd_media_rm(args: argparse.Namespace, rt: Any) -> int:
    """Delete named media files."""
    if not args.yes:
        print("Error: pass --yes to delete media files", file=sys.stderr)
        return 1
    count = delete_media(rt.col, args.names)
    if not args.quiet:
        print(f"Requested deletion of {count} file(s)")
    return 0


def cmd_media_check(args: argparse.Namespace, rt: Any) -> int:
    """Report unused and missing media; optionally delete the unused files."""
    report = check_media(rt.col)
    if not args.quiet:
        print(format_report(report, json_output=args.json))

    if args.delete:
        if not args.yes:
            print("Error: pass --yes together with --delete", file=sys.stderr)
            return 1
        count = delete_media(rt.col, report.unused)
        if not args.quiet:
            print(f"Deleted {count} unused file(s)")
        return 0

    return 1 if report.missing else 0


def cmd_serve(args: argparse.Namespace, rt: Any) -> int:
    """Start local JSON API server."""
    try:
        import uvicorn

        from .api.app import create_app, generate_token
    except ImportError as e:
        print(
            "Error: API dependencies not installed. "
            "Install with: pip install deckhand[api]",
            file=sys.stderr
        )
        print(f"Details: {e}", file=sys.stderr)
        return 1

    token = None
    if args.token == "auto":
        token = generate_token()
        print(f"Generated bearer token: {token}")
    elif args.token != "none":
        token = args.token

    app = create_app(rt, token=token, enable_cors=args.cors)
    uvicorn.run(app, host=args.host, port=args.port, log_level="info")
    return 0


def version_string() -> str:
    return (
        f"deckhand {__version__}\n"
        f"python {platform.python_version()}\n"
        f"platform {platform.platform()}"
    )


def main() -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="deck", description="Deckhand CLI"
    )
    parser.add_argument(
        "--version", action="version", version=version_string()
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: search cwd/deck.toml, collection/deck.toml)",
    )
    parser.add_argument(
        "--collection",
        type=Path,
        default=None,
        help="Path to collection directory (overrides config)",
    )
    parser.add_argument(
        "--db",
        type=Path,
        default=None,
        help="Path to collection database (overrides config)",
    )
    parser.add_argument(
        "--media",
        type=Path,
        default=None,
        help="Path to media folder (overrides config)",
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Minimize output"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Debug logging on stderr"
    )
    parser.add_argument(
        "--json", action="store_true", help="Machine-readable output"
    )

    subparsers = parser.add_subparsers(dest="cmd", required=True)

    # notetype command
    parser_nt = subparsers.add_parser("notetype", help="Inspect and edit note types")
    nt_sub = parser_nt.add_subparsers(dest="notetype_cmd", required=True)

    nt_sub.add_parser("ls", help="List note types")

    parser_nt_show = nt_sub.add_parser("show", help="Print a note type as JSON")
    parser_nt_show.add_argument("id", type=int, help="Note type ID")

    parser_nt_get = nt_sub.add_parser("get", help="Print one string value")
    parser_nt_get.add_argument("id", type=int, help="Note type ID")
    parser_nt_get.add_argument("key", help="Top-level key")

    parser_nt_export = nt_sub.add_parser("export", help="Write a note type as YAML")
    parser_nt_export.add_argument("id", type=int, help="Note type ID")
    parser_nt_export.add_argument("-o", "--out", help="Output file (default: stdout)")

    parser_nt_import = nt_sub.add_parser("import", help="Add a note type from YAML")
    parser_nt_import.add_argument("file", help="YAML file")

    parser_nt_save = nt_sub.add_parser(
        "save", help="Apply an edited note type with template changes"
    )
    parser_nt_save.add_argument("file", help="YAML file with 'notetype' and 'changes'")
    parser_nt_save.add_argument(
        "--ordinals", choices=[m.value for m in OrdinalMode], default=None,
        help="How delete ordinals are resolved (default: from config, live)"
    )

    # media command
    parser_media = subparsers.add_parser("media", help="Manage media files")
    media_sub = parser_media.add_subparsers(dest="media_cmd", required=True)

    media_sub.add_parser("ls", help="List media files")

    parser_media_rm = media_sub.add_parser("rm", help="Delete media files")
    parser_media_rm.add_argument("names", nargs="+", help="Media file names")
    parser_media_rm.add_argument("--yes", action="store_true", help="Skip confirmation")

    parser_media_check = media_sub.add_parser("check", help="Find unused and missing media")
    parser_media_check.add_argument(
        "--delete", action="store_true", help="Delete unused files"
    )
    parser_media_check.add_argument("--yes", action="store_true", help="Skip confirmation")

    # serve command
    parser_serve = subparsers.add_parser("serve", help="Start local JSON API server")
    parser_serve.add_argument(
        "--host", default="127.0.0.1", help="Host to bind (default: 127.0.0.1)"
    )
    parser_serve.add_argument(
        "--port", type=int, default=8765, help="Port to bind (default: 8765)"
    )
    parser_serve.add_argument(
        "--token", default="auto",
        help="Bearer token ('auto' to generate, 'none' to disable)"
    )
    parser_serve.add_argument(
        "--cors", action="store_true", help="Enable CORS"
    )

    args = parser.parse_args()

    try:
        rt = build_runtime(
            collection_path=args.collection,
            db_path=args.db,
            media_path=args.media,
            config_path=args.config,
            log_level="DEBUG" if args.verbose else None,
        )
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.cmd == "notetype":
        notetype_handlers = {
            "ls": cmd_notetype_ls,
            "show": cmd_notetype_show,
            "get": cmd_notetype_get,
            "export": cmd_notetype_export,
            "import": cmd_notetype_import,
            "save": cmd_notetype_save,
        }
        handler = notetype_handlers.get(args.notetype_cmd)
    elif args.cmd == "media":
        media_handlers = {
            "ls": cmd_media_ls,
            "rm": cmd_media_rm,
            "check": cmd_media_check,
        }
        handler = media_handlers.get(args.media_cmd)
    else:
        handler = {"serve": cmd_serve}.get(args.cmd)

    if handler:
        try:
            exit_code = handler(args, rt)
        except (DeckhandError, OSError, TypeError, ValueError) as e:
            print(f"Error: {e}", file=sys.stderr)
            exit_code = 1
        finally:
            rt.col.close()
        sys.exit(exit_code)
    else:
        print(f"Unknown command: {args.cmd}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
