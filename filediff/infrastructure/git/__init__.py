"""Git primitives - process execution and unified diff parsing."""

from .diff_parser import (
    DiffParser,
    ParseError,
    diff_from_raw_output,
    split_raw_diff_output,
)
from .runner import CommandRunner, GitCommandRunner, GitResult, ToolExecutionError

__all__ = [
    "CommandRunner",
    "DiffParser",
    "GitCommandRunner",
    "GitResult",
    "ParseError",
    "ToolExecutionError",
    "diff_from_raw_output",
    "split_raw_diff_output",
]
