"""Domain models for filediff."""

from filediff.domain.diff import (
    Diff,
    DiffLine,
    DiffLineType,
    DiffResult,
    Hunk,
    HunkHeader,
    NotDiffable,
    NotDiffableReason,
)
from filediff.domain.file_change import (
    FileChange,
    FileStatus,
    Repository,
    WorkingDirectoryFileChange,
)

__all__ = [
    "Diff",
    "DiffLine",
    "DiffLineType",
    "DiffResult",
    "FileChange",
    "FileStatus",
    "Hunk",
    "HunkHeader",
    "NotDiffable",
    "NotDiffableReason",
    "Repository",
    "WorkingDirectoryFileChange",
]
