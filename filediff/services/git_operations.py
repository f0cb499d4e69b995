"""Git operations service.

Answers questions about the repository that a diff request depends on:
whether a path is inside a repository, and how git sees a changed file.
"""

from __future__ import annotations

import logging
from pathlib import Path

from filediff.domain.file_change import FileStatus, WorkingDirectoryFileChange
from filediff.infrastructure.git.runner import CommandRunner, GitCommandRunner, ToolExecutionError

logger = logging.getLogger(__name__)


class GitRepositoryError(Exception):
    """Raised when directory is not a git repository."""

    pass


class GitOperationsService:
    """Core service for repository status queries.

    Runs git through an injected CommandRunner and returns domain models.
    """

    def __init__(self, repo_path: str | Path = ".", runner: CommandRunner | None = None):
        """Initialize with repository path.

        Args:
            repo_path: Path to git repository (default: current directory)
            runner: Runs git (default: GitCommandRunner)
        """
        self.repo_path = Path(repo_path)
        self.runner = runner or GitCommandRunner()

    async def is_git_repository(self) -> bool:
        """Check if repo_path is inside a git repository.

        Returns:
            True if valid git repo, False otherwise
        """
        try:
            await self.runner.run(["rev-parse", "--git-dir"], self.repo_path)
            return True
        except ToolExecutionError:
            return False

    async def get_file_status(self, file_path: str) -> WorkingDirectoryFileChange | None:
        """Get the working-directory status of a file.

        Args:
            file_path: Path to file, relative to the repository root

        Returns:
            WorkingDirectoryFileChange, or None if the file has no changes

        Raises:
            GitRepositoryError: If not in a git repository
            ToolExecutionError: If git status fails
        """
        if not await self.is_git_repository():
            raise GitRepositoryError(
                f"Not a git repository: {self.repo_path}\n"
                "Make sure you're running from within a git repository."
            )

        result = await self.runner.run(
            ["status", "--porcelain", "-z", "--untracked-files=all", "--", file_path],
            self.repo_path,
        )

        entries = result.stdout.split("\0")
        i = 0
        while i < len(entries):
            entry = entries[i]
            if len(entry) < 4:
                i += 1
                continue
            code, path = entry[:2], entry[3:]
            status = FileStatus.from_porcelain(code)
            # Renames and copies are followed by the original path
            if status in (FileStatus.RENAMED, FileStatus.COPIED):
                i += 1
            if path == file_path:
                logger.debug("Status of %s: %s (%r)", file_path, status.value, code)
                return WorkingDirectoryFileChange(path=path, status=status)
            i += 1

        return None
