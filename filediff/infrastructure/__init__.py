"""Infrastructure components for filediff.

This layer handles external system interactions:
- git/ - Running git and parsing its diff output
- config - Settings from YAML and environment
"""

from .config import ConfigError, DiffSettings
from .git import (
    CommandRunner,
    DiffParser,
    GitCommandRunner,
    GitResult,
    ParseError,
    ToolExecutionError,
    diff_from_raw_output,
    split_raw_diff_output,
)
from .git.diff_parser import (
    format_diff_as_json,
    format_diff_as_text,
    format_not_diffable,
    is_binary_file_marker,
    read_diff,
)

__all__ = [
    # Configuration
    "ConfigError",
    "DiffSettings",
    # Git primitives
    "CommandRunner",
    "DiffParser",
    "GitCommandRunner",
    "GitResult",
    "ParseError",
    "ToolExecutionError",
    "diff_from_raw_output",
    "split_raw_diff_output",
    "format_diff_as_json",
    "format_diff_as_text",
    "format_not_diffable",
    "is_binary_file_marker",
    "read_diff",
]
