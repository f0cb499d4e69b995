"""Domain models for a single file's parsed diff.

Parse-once pattern: raw patch text is parsed into these models at the
boundary (see infrastructure.git.diff_parser). Everything here is
immutable; a Diff is built fresh per request and owned by the caller.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Union

HUNK_HEADER_PATTERN = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@ ?(.*)$")


# ============================================================
# Domain Models
# ============================================================


class DiffLineType(Enum):
    """Type of line in a diff."""

    ADDED = "added"
    REMOVED = "removed"
    CONTEXT = "context"


@dataclass(frozen=True)
class DiffLine:
    """A single line from a diff with metadata.

    Attributes:
        content: The line content (without the +/-/space prefix)
        raw_line: The original line including its prefix
        line_type: Whether this is an added, removed, or context line
        old_line_number: Line number in the old file (None for added lines)
        new_line_number: Line number in the new file (None for removed lines)
        no_trailing_newline: True when git flagged this line with
            "\\ No newline at end of file"
    """

    content: str
    raw_line: str
    line_type: DiffLineType
    old_line_number: int | None = None
    new_line_number: int | None = None
    no_trailing_newline: bool = False

    @property
    def is_changed(self) -> bool:
        """Check if this line represents a change (added or removed)."""
        return self.line_type in (DiffLineType.ADDED, DiffLineType.REMOVED)

    def to_dict(self) -> dict:
        return {
            "type": self.line_type.value,
            "content": self.content,
            "old_line_number": self.old_line_number,
            "new_line_number": self.new_line_number,
            "no_trailing_newline": self.no_trailing_newline,
        }


@dataclass(frozen=True)
class HunkHeader:
    """The `@@ -a,b +c,d @@ section` line opening a hunk."""

    old_start: int
    old_count: int
    new_start: int
    new_count: int
    section: str = ""

    # --------------------------------------------------------
    # Factory Methods
    # --------------------------------------------------------

    @classmethod
    def from_line(cls, line: str) -> HunkHeader | None:
        """Parse a hunk header line.

        Omitted counts default to 1, as in `@@ -0,0 +1 @@`.

        Args:
            line: A line starting with "@@"

        Returns:
            Parsed HunkHeader, or None if the ranges cannot be read
        """
        match = HUNK_HEADER_PATTERN.match(line)
        if not match:
            return None
        return cls(
            old_start=int(match.group(1)),
            old_count=int(match.group(2)) if match.group(2) is not None else 1,
            new_start=int(match.group(3)),
            new_count=int(match.group(4)) if match.group(4) is not None else 1,
            section=match.group(5).strip(),
        )

    def __str__(self) -> str:
        header = f"@@ -{self.old_start},{self.old_count} +{self.new_start},{self.new_count} @@"
        return f"{header} {self.section}" if self.section else header


@dataclass(frozen=True)
class Hunk:
    """A contiguous block of changes, with the lines git emitted for it."""

    header: HunkHeader
    lines: tuple[DiffLine, ...] = ()

    # --------------------------------------------------------
    # Public API
    # --------------------------------------------------------

    @property
    def old_start(self) -> int:
        return self.header.old_start

    @property
    def old_count(self) -> int:
        return self.header.old_count

    @property
    def new_start(self) -> int:
        return self.header.new_start

    @property
    def new_count(self) -> int:
        return self.header.new_count

    def get_added_lines(self) -> list[DiffLine]:
        """Get only added lines."""
        return [line for line in self.lines if line.line_type == DiffLineType.ADDED]

    def get_removed_lines(self) -> list[DiffLine]:
        """Get only removed lines."""
        return [line for line in self.lines if line.line_type == DiffLineType.REMOVED]

    def get_changed_lines(self) -> list[DiffLine]:
        """Get all changed lines (both added and removed)."""
        return [line for line in self.lines if line.is_changed]

    def get_context_lines(self) -> list[DiffLine]:
        """Get only context lines (unchanged lines shown for context)."""
        return [line for line in self.lines if line.line_type == DiffLineType.CONTEXT]

    def get_annotated_content(self) -> str:
        """Return hunk content with new-file line numbers prepended.

        Format:
        - Added lines (+) and context lines ( ) get: "  5: +code here"
        - Removed lines (-) get: "   -: -removed code" (no line number)

        Returns:
            Hunk header followed by the annotated lines
        """
        annotated = [str(self.header)]
        for line in self.lines:
            if line.new_line_number is None:
                annotated.append(f"   -: {line.raw_line}")
            else:
                annotated.append(f"{line.new_line_number:4d}: {line.raw_line}")
        return "\n".join(annotated)

    def to_dict(self, annotate_lines: bool = False) -> dict:
        """Convert hunk to dictionary for JSON serialization.

        Args:
            annotate_lines: If True, include the annotated text rendering

        Returns:
            Dictionary with hunk data suitable for JSON output
        """
        result = {
            "old_start": self.old_start,
            "old_count": self.old_count,
            "new_start": self.new_start,
            "new_count": self.new_count,
            "section": self.header.section,
            "lines": [line.to_dict() for line in self.lines],
        }
        if annotate_lines:
            result["annotated"] = self.get_annotated_content()
        return result


@dataclass(frozen=True)
class Diff:
    """A single file's diff: its header lines and ordered hunks.

    Use DiffParser.parse() to build one from raw patch text.
    """

    header_lines: tuple[str, ...] = ()
    hunks: tuple[Hunk, ...] = ()

    # --------------------------------------------------------
    # Public API
    # --------------------------------------------------------

    @property
    def is_empty(self) -> bool:
        """Check if the diff contains no hunks."""
        return not self.hunks

    @property
    def old_path(self) -> str | None:
        """Path of the old file from the `---` header, None for /dev/null."""
        return self._header_path("--- ", "a/")

    @property
    def new_path(self) -> str | None:
        """Path of the new file from the `+++` header, None for /dev/null."""
        return self._header_path("+++ ", "b/")

    @property
    def is_new_file(self) -> bool:
        return "--- /dev/null" in self.header_lines or any(
            line.startswith("new file mode") for line in self.header_lines
        )

    @property
    def is_deleted_file(self) -> bool:
        return "+++ /dev/null" in self.header_lines or any(
            line.startswith("deleted file mode") for line in self.header_lines
        )

    @property
    def is_rename(self) -> bool:
        return any(line.startswith(("rename from ", "rename to ")) for line in self.header_lines)

    @property
    def lines(self) -> Iterator[DiffLine]:
        """All lines of all hunks, in order."""
        for hunk in self.hunks:
            yield from hunk.lines

    def line_for_new_number(self, line_number: int) -> DiffLine | None:
        """Find the line shown at a given new-file line number."""
        for line in self.lines:
            if line.new_line_number == line_number:
                return line
        return None

    def line_for_old_number(self, line_number: int) -> DiffLine | None:
        """Find the line shown at a given old-file line number."""
        for line in self.lines:
            if line.old_line_number == line_number:
                return line
        return None

    def to_dict(self, annotate_lines: bool = False) -> dict:
        """Convert diff to dictionary for JSON serialization."""
        return {
            "diffable": True,
            "old_path": self.old_path,
            "new_path": self.new_path,
            "hunks": [hunk.to_dict(annotate_lines=annotate_lines) for hunk in self.hunks],
        }

    # --------------------------------------------------------
    # Private Methods
    # --------------------------------------------------------

    def _header_path(self, marker: str, prefix: str) -> str | None:
        for line in self.header_lines:
            if line.startswith(marker):
                path = line[len(marker):].rstrip("\t")
                if path == "/dev/null":
                    return None
                return path[len(prefix):] if path.startswith(prefix) else path
        return None


class NotDiffableReason(Enum):
    """Why a patch was recognized but not parsed line by line."""

    BINARY = "binary"
    TOO_LARGE = "too_large"


@dataclass(frozen=True)
class NotDiffable:
    """A diff that callers should render as a placeholder."""

    reason: NotDiffableReason
    message: str = ""

    def to_dict(self, annotate_lines: bool = False) -> dict:
        return {
            "diffable": False,
            "reason": self.reason.value,
            "message": self.message,
        }


# Result of parsing a patch: a line-by-line Diff, or a placeholder.
# Hard failures are raised as ParseError instead.
DiffResult = Union[Diff, NotDiffable]
