"""CLI entry point for contrib-inspector."""

import argparse
import sys
from typing import Optional

from contrib_inspector import __version__


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="contrib-inspector",
        description=(
            "List the files and directories that currently have lines "
            "that were changed by you."
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--email", action="append", default=[],
        help="Your email address. Repeatable. Defaults to git's configured user.email",
    )
    parser.add_argument(
        "--ignore-user", action="append", default=[], dest="ignore_users",
        help="Email of a user to ignore, e.g. someone who left the project. Repeatable",
    )
    parser.add_argument("--max-age", help="Don't count commits older than this. Example: 6M")
    parser.add_argument(
        "--overwritten", action="store_true",
        help="Include lines that were later overwritten in the count",
    )
    parser.add_argument(
        "--show-authors", action="store_true",
        help="Show the top authors of each file or directory",
    )
    parser.add_argument("--max-authors", type=int, default=3)
    parser.add_argument("--flat", action="store_true", help="Show percentage changed per file")
    parser.add_argument(
        "--reverse", action="store_true",
        help="Start with the files with the smallest percentage",
    )
    parser.add_argument(
        "--all", action="store_true",
        help="Include all files, even the ones with no lines changed by you",
    )
    parser.add_argument(
        "--max-depth", type=int,
        help="Don't go deeper than this into trees when printing",
    )
    parser.add_argument(
        "-d", "--dir",
        help="Limit to the specified directory. Defaults to the entire repo",
    )
    parser.add_argument("-j", "--workers", type=int, help="Number of worker threads")
    parser.add_argument("--no-progress", action="store_true", help="Don't display progress")
    parser.add_argument(
        "-v", "--verbose", action="count", default=0,
        help="Verbose mode (-v, -vv), disables progress",
    )
    parser.add_argument("--tui", action="store_true", help="Browse the results in a TUI")
    return parser


def _print_progress(done: int, total: int) -> None:
    sys.stderr.write(f"\r{done}/{total}")
    sys.stderr.flush()


def main(argv: Optional[list[str]] = None) -> int:
    """Run an inspection and print the report."""
    from dotenv import load_dotenv

    load_dotenv()  # Load .env file (e.g. CONTRIB_INSPECTOR_EMAIL)

    from contrib_inspector.analyzer import Analyzer
    from contrib_inspector.config import load_config
    from contrib_inspector.exceptions import ContribInspectorError
    from contrib_inspector.logging_config import setup_logging
    from contrib_inspector.models import Mode
    from contrib_inspector.render import render_report

    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        config = load_config(
            directory=args.dir,
            emails=args.email,
            ignore_users=args.ignore_users,
            max_age=args.max_age,
            mode=Mode.overwritten if args.overwritten else Mode.direct,
            show_authors=args.show_authors,
            max_authors=args.max_authors,
            flat=args.flat,
            reverse=args.reverse,
            all=args.all,
            max_depth=args.max_depth,
            workers=args.workers,
            progress=not args.no_progress,
            verbose=args.verbose,
        )

        if args.tui:
            from contrib_inspector.app import ContribInspectorApp

            ContribInspectorApp(config).run()
            return 0

        on_progress = _print_progress if config.show_progress else None
        result = Analyzer(config, on_progress=on_progress).inspect()
        if on_progress:
            sys.stderr.write("\r\033[K")
            sys.stderr.flush()
    except ContribInspectorError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    for line in render_report(result, config):
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
