"""Diff commands.

Thin commands that orchestrate the diff services and print the result.
Each returns a process exit code.
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

from filediff.domain.diff import DiffResult
from filediff.domain.file_change import (
    FileChange,
    FileStatus,
    Repository,
    WorkingDirectoryFileChange,
)
from filediff.infrastructure.config import ConfigError, DiffSettings
from filediff.infrastructure.git.diff_parser import (
    ParseError,
    diff_from_raw_output,
    format_diff_as_json,
    format_diff_as_text,
    read_diff,
)
from filediff.infrastructure.git.runner import ToolExecutionError
from filediff.services.git_diff import GitDiffService
from filediff.services.git_operations import GitOperationsService, GitRepositoryError


def cmd_commit_diff(
    commitish: str,
    file_path: str,
    repo_path: str = ".",
    output_format: str = "json",
    annotate_lines: bool = False,
    config_path: str | None = None,
) -> int:
    """Show a file's change in a commit, relative to its first parent.

    Args:
        commitish: Commit SHA, branch, tag or relative reference
        file_path: Path of the file, relative to the repository root
        repo_path: Path to the repository (default: current directory)
        output_format: 'json' (default) or 'text'
        annotate_lines: If True, include line-numbered hunk text
        config_path: Optional settings file

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    try:
        settings = DiffSettings.load(config_path, repo_path=repo_path)
    except ConfigError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 1

    repository = Repository.from_string(repo_path)
    service = GitDiffService(settings.create_runner(), settings.create_parser())

    try:
        result = asyncio.run(
            service.get_commit_diff(repository, FileChange(path=file_path), commitish)
        )
    except ToolExecutionError as e:
        print(f"git failed: {e}", file=sys.stderr)
        return 1
    except ParseError as e:
        print(f"Could not parse diff: {e}", file=sys.stderr)
        return 1

    _print_result(result, output_format, annotate_lines)
    return 0


def cmd_working_diff(
    file_path: str,
    status: str | None = None,
    repo_path: str = ".",
    output_format: str = "json",
    annotate_lines: bool = False,
    config_path: str | None = None,
) -> int:
    """Show a file's uncommitted change in the working directory.

    Args:
        file_path: Path of the file, relative to the repository root
        status: File status name; detected with `git status` when None
        repo_path: Path to the repository (default: current directory)
        output_format: 'json' (default) or 'text'
        annotate_lines: If True, include line-numbered hunk text
        config_path: Optional settings file

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    try:
        settings = DiffSettings.load(config_path, repo_path=repo_path)
    except ConfigError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 1

    try:
        file_status = FileStatus.from_string(status) if status is not None else None
    except ValueError as e:
        print(str(e), file=sys.stderr)
        return 1

    repository = Repository.from_string(repo_path)
    runner = settings.create_runner()
    service = GitDiffService(runner, settings.create_parser())

    async def run() -> DiffResult | None:
        if file_status is not None:
            change = WorkingDirectoryFileChange(path=file_path, status=file_status)
        else:
            change = await GitOperationsService(repository.path, runner).get_file_status(file_path)
            if change is None:
                return None
        return await service.get_working_directory_diff(repository, change)

    try:
        result = asyncio.run(run())
    except GitRepositoryError as e:
        print(str(e), file=sys.stderr)
        return 1
    except ToolExecutionError as e:
        print(f"git failed: {e}", file=sys.stderr)
        return 1
    except ParseError as e:
        print(f"Could not parse diff: {e}", file=sys.stderr)
        return 1

    if result is None:
        print(f"No changes to {file_path}")
        return 0

    _print_result(result, output_format, annotate_lines)
    return 0


def cmd_parse_diff(
    input_file: str | None = None,
    output_format: str = "json",
    annotate_lines: bool = False,
    config_path: str | None = None,
) -> int:
    """Parse saved `--patch-with-raw -z` output from a file or stdin.

    Args:
        input_file: Optional path to read from. If None, reads from stdin.
        output_format: 'json' (default) or 'text'
        annotate_lines: If True, include line-numbered hunk text
        config_path: Optional settings file

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    try:
        settings = DiffSettings.load(config_path, repo_path=Path.cwd())
    except ConfigError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 1

    try:
        output = read_diff(input_file)
    except FileNotFoundError:
        print(f"Input file not found: {input_file}", file=sys.stderr)
        return 1

    try:
        result = diff_from_raw_output(output, settings.create_parser())
    except ParseError as e:
        print(f"Could not parse diff: {e}", file=sys.stderr)
        return 1

    _print_result(result, output_format, annotate_lines)
    return 0


def _print_result(result: DiffResult, output_format: str, annotate_lines: bool) -> None:
    if output_format == "text":
        print(format_diff_as_text(result, annotate_lines=annotate_lines))
    else:
        print(format_diff_as_json(result, annotate_lines=annotate_lines))
