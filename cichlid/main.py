"""
Command-line entry point: runs the cache commands outside an IDE.
Loads ``.env``, reads settings, and dispatches one sub-command.
"""

from __future__ import annotations

import argparse
import sys

import dotenv
import pydantic

from cichlid import plugin
from cichlid.config import CichlidSettings
from cichlid.host import presentation
from cichlid.utils import logger

log = logger.create_logger("CLI")


def _build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="cichlid", description="Purge Xcode derived data and archives.")
    ap.add_argument("-y", "--yes", action="store_true", help="Answer yes to confirmations")
    ap.add_argument("--project", help="Project name (defaults to CICHLID_PROJECT)")

    # Same options after the sub-command; SUPPRESS keeps a value given before it.
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "-y", "--yes", action="store_true", default=argparse.SUPPRESS, help="Answer yes to confirmations"
    )
    common.add_argument("--project", default=argparse.SUPPRESS, help="Project name (defaults to CICHLID_PROJECT)")

    sub = ap.add_subparsers(dest="cmd", required=True)
    sub.add_parser("open", parents=[common], help="Open the current project's DerivedData folder")
    sub.add_parser("delete-current", parents=[common], help="Delete the current project's DerivedData")
    sub.add_parser("delete-all", parents=[common], help="Delete the DerivedData of every project")
    sub.add_parser("delete-archives", parents=[common], help="Delete every stored archive")
    sub.add_parser("paths", parents=[common], help="Show the cache roots in use")
    return ap


def main(argv: list[str] | None = None) -> int:
    """Run one command.  Returns the process exit status."""
    dotenv.load_dotenv()
    args = _build_parser().parse_args(argv)
    logger.open_log_file()
    try:
        return _run(args)
    finally:
        logger.close_log_file()


def _run(args: argparse.Namespace) -> int:
    try:
        settings = CichlidSettings()
    except pydantic.ValidationError as exc:
        log.error("Invalid configuration", {"errors": exc.error_count()})
        print(f"error: {exc}", file=sys.stderr)
        return 2

    project = args.project or settings.current_project
    presenter = presentation.ConsolePresenter(interactive=False if args.yes else None, default_confirm=args.yes)
    commands, resolver, _engine = plugin.build_commands(
        settings, lambda: project, presenter, presentation.SystemPathRevealer()
    )

    if args.cmd == "paths":
        print(f"DerivedData: {resolver.all_projects_cache()}")
        print(f"Archives:    {resolver.archives_root()}")
        current = resolver.current_project_cache(project)
        print(f"Current:     {current if current is not None else '-'}")
        return 0

    if args.cmd == "open":
        return 0 if commands.open_current_project_cache() else 1

    if args.cmd == "delete-current":
        result = commands.delete_current_project_cache()
    elif args.cmd == "delete-all":
        result = commands.delete_all_projects_cache()
    else:
        result = commands.delete_all_archives()

    # A declined confirmation is not a failure.
    if result is None:
        return 1 if args.cmd == "delete-current" else 0
    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(main())
