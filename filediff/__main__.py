#!/usr/bin/env python3
"""CLI entry point for filediff.

Usage:
    python -m filediff <command> [options]

Commands:
    commit   Show a file's change in a commit, relative to its first parent
    working  Show a file's uncommitted change in the working directory
    parse    Parse saved `git ... --patch-with-raw -z` output
"""

from __future__ import annotations

import argparse
import sys

from filediff.commands.diff import cmd_commit_diff, cmd_parse_diff, cmd_working_diff
from filediff.domain.file_change import FileStatus
from filediff.logging import configure_logging


def _add_output_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--format",
        choices=["json", "text"],
        default="json",
        help="Output format (default: json)",
    )
    parser.add_argument(
        "--annotate-lines",
        action="store_true",
        help="Prepend new-file line numbers to each diff line (e.g., '  5: +code')",
    )
    parser.add_argument(
        "--config",
        help="Path to a YAML settings file (default: .filediff.yml in the repository)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log git invocations and parse details to stderr",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="filediff",
        description="Retrieve and parse a single file's git diff",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  commit   Show a file's change in a commit, relative to its first parent
  working  Show a file's uncommitted change in the working directory
  parse    Parse saved `git ... --patch-with-raw -z` output

Examples:
  filediff commit HEAD~2 src/app.py --repo ~/code/project
  filediff working README.md --format text --annotate-lines
  git diff HEAD --patch-with-raw -z -- foo.txt | filediff parse
        """,
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # commit command
    parser_commit = subparsers.add_parser(
        "commit",
        help="Show a file's change in a commit",
    )
    parser_commit.add_argument("commitish", help="Commit SHA, branch, tag or relative reference")
    parser_commit.add_argument("path", help="File path relative to the repository root")
    parser_commit.add_argument(
        "--repo",
        default=".",
        help="Path to the git repository (default: current directory)",
    )
    _add_output_arguments(parser_commit)

    # working command
    parser_working = subparsers.add_parser(
        "working",
        help="Show a file's uncommitted change",
    )
    parser_working.add_argument("path", help="File path relative to the repository root")
    parser_working.add_argument(
        "--status",
        choices=[status.value for status in FileStatus],
        help="File status (default: detected with git status)",
    )
    parser_working.add_argument(
        "--repo",
        default=".",
        help="Path to the git repository (default: current directory)",
    )
    _add_output_arguments(parser_working)

    # parse command
    parser_parse = subparsers.add_parser(
        "parse",
        help="Parse saved --patch-with-raw -z output",
    )
    parser_parse.add_argument(
        "--input-file",
        help="Path to the saved output. If not provided, reads from stdin",
    )
    _add_output_arguments(parser_parse)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    configure_logging(args.verbose)

    # Route to command implementations with explicit parameters
    if args.command == "commit":
        return cmd_commit_diff(
            commitish=args.commitish,
            file_path=args.path,
            repo_path=args.repo,
            output_format=args.format,
            annotate_lines=args.annotate_lines,
            config_path=args.config,
        )

    elif args.command == "working":
        return cmd_working_diff(
            file_path=args.path,
            status=args.status,
            repo_path=args.repo,
            output_format=args.format,
            annotate_lines=args.annotate_lines,
            config_path=args.config,
        )

    elif args.command == "parse":
        return cmd_parse_diff(
            input_file=args.input_file,
            output_format=args.format,
            annotate_lines=args.annotate_lines,
            config_path=args.config,
        )

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
