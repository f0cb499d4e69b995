"""Domain models for changed files and the repository they live in.

These describe the inputs to a diff request: which path changed, and for
working-directory changes, how git sees it (new, renamed, modified...).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class FileStatus(Enum):
    """Working-directory status of a file."""

    NEW = "new"
    MODIFIED = "modified"
    DELETED = "deleted"
    RENAMED = "renamed"
    COPIED = "copied"
    CONFLICTED = "conflicted"

    @classmethod
    def from_string(cls, value: str) -> FileStatus:
        """Parse FileStatus from string value.

        Args:
            value: Status name, case-insensitive (e.g. "new", "Renamed")

        Returns:
            Corresponding FileStatus enum value

        Raises:
            ValueError: If value is not a valid FileStatus

        Examples:
            >>> FileStatus.from_string("new")
            <FileStatus.NEW: 'new'>
        """
        value_lower = value.lower()
        for member in cls:
            if member.value == value_lower:
                return member
        valid_values = [m.value for m in cls]
        raise ValueError(
            f"Invalid file status: {value}. Must be one of: {', '.join(valid_values)}"
        )

    @classmethod
    def from_porcelain(cls, code: str) -> FileStatus:
        """Map a `git status --porcelain` XY code to a FileStatus.

        Args:
            code: Two-character status code (e.g. "??", " M", "R ")

        Returns:
            Corresponding FileStatus enum value
        """
        code = code.ljust(2)
        index, worktree = code[0], code[1]

        # Unmerged pairs: DD, AU, UD, UA, DU, AA, UU
        if "U" in code or code in ("DD", "AA"):
            return cls.CONFLICTED
        # Deleted from the working tree wins over a staged add or rename
        if worktree == "D":
            return cls.DELETED
        if code == "??" or index == "A" or worktree == "A":
            return cls.NEW
        if index == "R" or worktree == "R":
            return cls.RENAMED
        if index == "C" or worktree == "C":
            return cls.COPIED
        if index == "D" or worktree == "D":
            return cls.DELETED
        return cls.MODIFIED


@dataclass(frozen=True)
class Repository:
    """A git repository identified by its working tree root."""

    path: Path

    @classmethod
    def from_string(cls, path: str) -> Repository:
        return cls(path=Path(path).expanduser().resolve())


@dataclass(frozen=True)
class FileChange:
    """A changed file, identified by its repository-relative path."""

    path: str


@dataclass(frozen=True)
class WorkingDirectoryFileChange(FileChange):
    """A changed file in the working directory, with its status."""

    status: FileStatus = FileStatus.MODIFIED
