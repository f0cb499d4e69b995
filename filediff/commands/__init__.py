"""Thin command orchestrators for the filediff CLI."""

from filediff.commands.diff import cmd_commit_diff, cmd_parse_diff, cmd_working_diff

__all__ = [
    "cmd_commit_diff",
    "cmd_parse_diff",
    "cmd_working_diff",
]
