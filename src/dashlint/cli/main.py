"""
dashlint command line.

Usage:
    dashlint lint <path>... [--config FILE] [--format table|json] [--rule NAME] [--strict]
    dashlint rules
"""

from __future__ import annotations

import argparse
import sys
from typing import Sequence

from dashlint import __version__
from dashlint.config import get_settings
from dashlint.logging import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dashlint", description="Lint Grafana dashboards")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--log-level", help="Log level (default: DASHLINT_LOG_LEVEL or WARNING)")
    subparsers = parser.add_subparsers(dest="command")

    lint_parser = subparsers.add_parser("lint", help="Lint dashboard files or directories")
    lint_parser.add_argument("paths", nargs="+", help="Dashboard JSON files or directories")
    lint_parser.add_argument("--config", help="Lint config file (default: .lint next to each path)")
    lint_parser.add_argument(
        "--format", dest="output_format", choices=["table", "json"], help="Output format"
    )
    lint_parser.add_argument(
        "--rule", dest="rules", action="append", help="Only run this rule (repeatable)"
    )
    lint_parser.add_argument("--strict", action="store_true", help="Fail on warnings")
    lint_parser.add_argument("--verbose", "-v", action="store_true", help="Show passed checks")
    lint_parser.add_argument("--output", dest="output_file", help="Write report to a file")

    subparsers.add_parser("rules", help="List available lint rules")

    return parser


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(args.log_level or settings.log_level, settings.log_format)

    if args.command == "lint":
        from dashlint.cli.lint import lint_command

        sys.exit(
            lint_command(
                args.paths,
                config=args.config,
                output_format=args.output_format,
                rules=args.rules,
                strict=args.strict,
                verbose=args.verbose,
                output_file=args.output_file,
            )
        )
    elif args.command == "rules":
        from dashlint.cli.lint import rules_command

        sys.exit(rules_command())
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
