"""Git diff service.

Builds the git invocation for a file's diff, runs it, and parses the
result into the Diff domain model. Invocation building is kept in pure
functions so it can be tested without running git.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

from filediff.domain.diff import DiffResult
from filediff.domain.file_change import (
    FileChange,
    FileStatus,
    Repository,
    WorkingDirectoryFileChange,
)
from filediff.infrastructure.git.diff_parser import DiffParser, diff_from_raw_output
from filediff.infrastructure.git.runner import (
    DEFAULT_SUCCESS_EXIT_CODES,
    CommandRunner,
    GitCommandRunner,
)

logger = logging.getLogger(__name__)

RAW_PATCH_ARGS = ("--patch-with-raw", "-z")

# `git diff --no-index` mirrors diff(1): 0 when identical, 1 when the files
# differ, anything else is an error. --exit-code does not change this.
NO_INDEX_SUCCESS_EXIT_CODES = frozenset({0, 1})


@dataclass(frozen=True)
class GitInvocation:
    """Arguments and accepted exit codes for one git call."""

    args: tuple[str, ...]
    success_exit_codes: frozenset[int] = field(default=DEFAULT_SUCCESS_EXIT_CODES)


# ============================================================
# Invocation Builders
# ============================================================


def build_commit_diff_invocation(file: FileChange, commitish: str) -> GitInvocation:
    """Build the invocation showing a file's change in a commit.

    The change is relative to the commit's first parent, so merge commits
    show what the merge brought into the mainline.

    Args:
        file: The file to diff
        commitish: Any identifier that dereferences to a commit

    Returns:
        GitInvocation for `git log`
    """
    return GitInvocation(
        args=(
            "log",
            commitish,
            "-m",
            "-1",
            "--first-parent",
            *RAW_PATCH_ARGS,
            "--",
            file.path,
        )
    )


def build_working_directory_diff_invocation(file: WorkingDirectoryFileChange) -> GitInvocation:
    """Build the invocation for a file's uncommitted change.

    - New files are compared to an empty file, so all content is added.
    - Renamed files are compared to the index. This misses changes staged
      to the renamed file before the rename; showing them would need the
      blob of the old path in HEAD.
    - Everything else is compared to HEAD.

    Args:
        file: The working-directory file and its status

    Returns:
        GitInvocation for `git diff`
    """
    if file.status == FileStatus.NEW:
        return GitInvocation(
            args=("diff", "--no-index", *RAW_PATCH_ARGS, "--", "/dev/null", file.path),
            success_exit_codes=NO_INDEX_SUCCESS_EXIT_CODES,
        )
    if file.status == FileStatus.RENAMED:
        return GitInvocation(args=("diff", *RAW_PATCH_ARGS, "--", file.path))
    return GitInvocation(args=("diff", "HEAD", *RAW_PATCH_ARGS, "--", file.path))


# ============================================================
# Service
# ============================================================


class GitDiffService:
    """Retrieves and parses single-file diffs.

    Each call is independent: one git process, then a fresh parse. Nothing
    is shared between calls, so concurrent requests need no locking.
    """

    def __init__(self, runner: CommandRunner | None = None, parser: DiffParser | None = None):
        """Initialize with injected dependencies.

        Args:
            runner: Runs git (default: GitCommandRunner)
            parser: Parses patch text (default thresholds if None)
        """
        self.runner = runner or GitCommandRunner()
        self.parser = parser or DiffParser()

    # --------------------------------------------------------
    # Public API
    # --------------------------------------------------------

    async def get_commit_diff(
        self, repository: Repository, file: FileChange, commitish: str
    ) -> DiffResult:
        """Render the difference between a file in a commit and its parent.

        Args:
            repository: Repository containing the commit
            file: The file to diff
            commitish: A commit SHA or anything that dereferences to a commit

        Returns:
            Parsed Diff, or NotDiffable for binary/oversized content

        Raises:
            ToolExecutionError: If git fails
            ParseError: If git's output cannot be parsed
        """
        invocation = build_commit_diff_invocation(file, commitish)
        return await self._run(repository, invocation)

    async def get_working_directory_diff(
        self, repository: Repository, file: WorkingDirectoryFileChange
    ) -> DiffResult:
        """Render the uncommitted change of a file in the working directory.

        Args:
            repository: Repository containing the file
            file: The file to diff, with its status

        Returns:
            Parsed Diff, or NotDiffable for binary/oversized content

        Raises:
            ToolExecutionError: If git fails
            ParseError: If git's output cannot be parsed
        """
        invocation = build_working_directory_diff_invocation(file)
        return await self._run(repository, invocation)

    # --------------------------------------------------------
    # Private Methods
    # --------------------------------------------------------

    async def _run(self, repository: Repository, invocation: GitInvocation) -> DiffResult:
        result = await self.runner.run(
            list(invocation.args),
            repository.path,
            success_exit_codes=invocation.success_exit_codes,
        )
        logger.debug("git exited with %s, %d bytes of output", result.exit_code, len(result.stdout))
        return await asyncio.to_thread(diff_from_raw_output, result.stdout, self.parser)
