"""Infrastructure for reading and parsing git diffs.

Turns the stdout of a `--patch-with-raw -z` git invocation into the Diff
domain model, and formats parsed diffs for output.
"""

from __future__ import annotations

import json
import logging
import sys
from dataclasses import dataclass
from pathlib import Path

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

logger = logging.getLogger(__name__)

# Largest patch text handed to the line parser, in characters
DEFAULT_MAX_DIFF_SIZE = 70_000_000 // 16
DEFAULT_MAX_LINE_COUNT = 500_000

_FILE_HEADER_PREFIXES = (
    "index ",
    "--- ",
    "+++ ",
    "new file mode",
    "deleted file mode",
    "old mode",
    "new mode",
    "similarity index",
    "dissimilarity index",
    "rename from",
    "rename to",
    "copy from",
    "copy to",
)


class ParseError(Exception):
    """Raised when patch text cannot be interpreted."""

    def __init__(self, message: str, line_number: int | None = None, line: str | None = None):
        self.line_number = line_number
        self.line = line
        if line_number is not None:
            message = f"{message} (line {line_number}: {line!r})"
        super().__init__(message)


# ============================================================
# Raw Output Handling
# ============================================================


def split_raw_diff_output(output: str) -> str:
    """Extract the patch text from `--patch-with-raw -z` output.

    The raw summary comes first and sections are NUL-separated; the patch
    is always the last section. Output without a NUL is returned as-is.

    Args:
        output: Full stdout of the git invocation

    Returns:
        The patch text (possibly empty)
    """
    return output.split("\0")[-1]


def diff_from_raw_output(output: str, parser: DiffParser | None = None) -> DiffResult:
    """Parse the patch section of `--patch-with-raw -z` output.

    Args:
        output: Full stdout of the git invocation
        parser: Parser to use (default thresholds if None)

    Returns:
        Parsed Diff, or NotDiffable for binary/oversized content

    Raises:
        ParseError: If the patch text is malformed
    """
    parser = parser or DiffParser()
    return parser.parse(split_raw_diff_output(output))


# ============================================================
# Parser
# ============================================================


@dataclass(frozen=True)
class DiffParser:
    """Parses a single file's unified diff into a Diff.

    Holds only thresholds; every parse() call starts from scratch, so one
    instance can be shared across threads.
    """

    max_diff_size: int = DEFAULT_MAX_DIFF_SIZE
    max_line_count: int = DEFAULT_MAX_LINE_COUNT

    # --------------------------------------------------------
    # Public API
    # --------------------------------------------------------

    def parse(self, text: str) -> DiffResult:
        """Parse unified diff text.

        Args:
            text: Patch text for one file (may be empty)

        Returns:
            Diff with ordered hunks, or NotDiffable when the content is
            binary or exceeds the size thresholds

        Raises:
            ParseError: On malformed hunk headers, unexpected lines, or
                hunks shorter than their header declares
        """
        if len(text) > self.max_diff_size:
            return NotDiffable(
                NotDiffableReason.TOO_LARGE,
                f"Diff is {len(text)} characters, limit is {self.max_diff_size}",
            )

        lines = text.split("\n")
        if lines and lines[-1] == "":
            lines.pop()

        if len(lines) > self.max_line_count:
            return NotDiffable(
                NotDiffableReason.TOO_LARGE,
                f"Diff has {len(lines)} lines, limit is {self.max_line_count}",
            )

        header_lines: list[str] = []
        index = 0

        # File header: everything before the first hunk
        while index < len(lines) and not lines[index].startswith("@@"):
            line = lines[index]
            if is_binary_file_marker(line):
                return NotDiffable(NotDiffableReason.BINARY, line)
            if line.startswith("diff --git") and header_lines:
                raise ParseError("Unexpected second file header", index + 1, line)
            if line.startswith("diff ") or line.startswith(_FILE_HEADER_PREFIXES):
                header_lines.append(line)
            elif line.strip():
                logger.debug("Skipping non-patch line %d: %r", index + 1, line)
            index += 1

        hunks: list[Hunk] = []
        while index < len(lines):
            header_index = index
            hunk, index = self._parse_hunk(lines, index)
            if hunks and hunk.old_start < hunks[-1].old_start:
                raise ParseError(
                    "Hunk out of order",
                    header_index + 1,
                    str(hunk.header),
                )
            hunks.append(hunk)

        logger.debug("Parsed %d hunks from %d lines", len(hunks), len(lines))
        return Diff(header_lines=tuple(header_lines), hunks=tuple(hunks))

    # --------------------------------------------------------
    # Private Methods
    # --------------------------------------------------------

    def _parse_hunk(self, lines: list[str], index: int) -> tuple[Hunk, int]:
        """Parse the hunk whose header is at lines[index].

        Returns:
            Tuple of (parsed Hunk, index of the first line after it)
        """
        header_index = index
        header_line = lines[index]
        if not header_line.startswith("@@"):
            if header_line.startswith("diff --git"):
                raise ParseError("Unexpected second file header", index + 1, header_line)
            raise ParseError("Expected hunk header", index + 1, header_line)

        header = HunkHeader.from_line(header_line)
        if header is None:
            raise ParseError("Malformed hunk header", index + 1, header_line)

        old_line = header.old_start
        new_line = header.new_start
        old_remaining = header.old_count
        new_remaining = header.new_count
        diff_lines: list[DiffLine] = []
        index += 1

        while index < len(lines):
            line = lines[index]

            if line.startswith("\\"):
                # "\ No newline at end of file" applies to the previous line
                if not diff_lines:
                    raise ParseError("No-newline marker before any line", index + 1, line)
                previous = diff_lines[-1]
                diff_lines[-1] = DiffLine(
                    content=previous.content,
                    raw_line=previous.raw_line,
                    line_type=previous.line_type,
                    old_line_number=previous.old_line_number,
                    new_line_number=previous.new_line_number,
                    no_trailing_newline=True,
                )
                index += 1
                continue

            if old_remaining == 0 and new_remaining == 0:
                break

            prefix = line[:1]
            if prefix == "+":
                if new_remaining == 0:
                    raise ParseError("Hunk has more added lines than declared", index + 1, line)
                diff_lines.append(
                    DiffLine(
                        content=line[1:],
                        raw_line=line,
                        line_type=DiffLineType.ADDED,
                        new_line_number=new_line,
                    )
                )
                new_line += 1
                new_remaining -= 1
            elif prefix == "-":
                if old_remaining == 0:
                    raise ParseError("Hunk has more removed lines than declared", index + 1, line)
                diff_lines.append(
                    DiffLine(
                        content=line[1:],
                        raw_line=line,
                        line_type=DiffLineType.REMOVED,
                        old_line_number=old_line,
                    )
                )
                old_line += 1
                old_remaining -= 1
            elif prefix in (" ", ""):
                # An empty line is a context line whose leading space was stripped
                if old_remaining == 0 or new_remaining == 0:
                    raise ParseError("Hunk has more context lines than declared", index + 1, line)
                diff_lines.append(
                    DiffLine(
                        content=line[1:],
                        raw_line=line,
                        line_type=DiffLineType.CONTEXT,
                        old_line_number=old_line,
                        new_line_number=new_line,
                    )
                )
                old_line += 1
                new_line += 1
                old_remaining -= 1
                new_remaining -= 1
            elif prefix == "@" or line.startswith("diff "):
                break
            else:
                raise ParseError("Unexpected line in hunk", index + 1, line)
            index += 1

        if old_remaining or new_remaining:
            raise ParseError(
                f"Truncated hunk: missing {old_remaining} old and {new_remaining} new lines",
                header_index + 1,
                header_line,
            )

        return Hunk(header=header, lines=tuple(diff_lines)), index


# ============================================================
# Edge Case Handling
# ============================================================


def is_binary_file_marker(line: str) -> bool:
    """Check if a line indicates a binary file.

    Args:
        line: A line from the diff

    Returns:
        True if this is a binary file marker
    """
    return line.startswith("Binary files") or "GIT binary patch" in line


# ============================================================
# Input Functions
# ============================================================


def read_diff(input_file: str | Path | None = None) -> str:
    """Read raw diff output from stdin or a file.

    Args:
        input_file: Optional path to read from. If None, reads from stdin.

    Returns:
        Raw diff content as a string

    Raises:
        FileNotFoundError: If the file doesn't exist
    """
    if input_file is None:
        return sys.stdin.read()
    with open(input_file, encoding="utf-8", errors="replace") as f:
        return f.read()


# ============================================================
# Output Functions
# ============================================================


def format_diff_as_json(result: DiffResult, annotate_lines: bool = False) -> str:
    """Format a parse result as JSON.

    Args:
        result: Parsed Diff or NotDiffable placeholder
        annotate_lines: If True, hunks include an annotated text rendering

    Returns:
        JSON string representation of the result
    """
    return json.dumps(result.to_dict(annotate_lines=annotate_lines), indent=2)


def format_not_diffable(result: NotDiffable) -> str:
    """Placeholder text shown instead of a line-by-line view."""
    if result.reason == NotDiffableReason.BINARY:
        return "Binary file not shown"
    return f"Diff too large to display ({result.message})"


def format_diff_as_text(result: DiffResult, annotate_lines: bool = False) -> str:
    """Format a parse result as human-readable text.

    Args:
        result: Parsed Diff or NotDiffable placeholder
        annotate_lines: If True, print every hunk line with its line number

    Returns:
        Text representation showing hunks and their line ranges
    """
    if isinstance(result, NotDiffable):
        return format_not_diffable(result)

    if result.is_empty:
        return "Empty diff (no hunks found)"

    lines = []
    path = result.new_path or result.old_path
    if path:
        lines.append(f"File: {path}")
    lines.append(f"Total hunks: {len(result.hunks)}")
    lines.append("")

    for i, hunk in enumerate(result.hunks, 1):
        lines.append(f"Hunk {i}: {hunk.header}")
        lines.append(f"  Old: lines {hunk.old_start}-{hunk.old_start + hunk.old_count - 1} ({hunk.old_count} lines)")
        lines.append(f"  New: lines {hunk.new_start}-{hunk.new_start + hunk.new_count - 1} ({hunk.new_count} lines)")
        if annotate_lines:
            lines.append(hunk.get_annotated_content())
        lines.append("")

    return "\n".join(lines)
