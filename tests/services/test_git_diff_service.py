"""Tests for GitDiffService with a mocked runner.

Tests cover:
- Invocation arguments and accepted exit codes passed to the runner
- Raw output splitting and parsing of the runner's stdout
- New files producing a single all-added hunk
- Error propagation (ToolExecutionError, ParseError)
- Not-diffable results for binary content
"""

from __future__ import annotations

import asyncio
import unittest
from pathlib import Path
from unittest.mock import AsyncMock

from filediff.domain.diff import Diff, DiffLineType, NotDiffable, NotDiffableReason
from filediff.domain.file_change import (
    FileChange,
    FileStatus,
    Repository,
    WorkingDirectoryFileChange,
)
from filediff.infrastructure.git.diff_parser import DiffParser, ParseError
from filediff.infrastructure.git.runner import GitResult, ToolExecutionError
from filediff.services.git_diff import GitDiffService


REPO = Repository(path=Path("/repo"))

NEW_FILE_OUTPUT = (
    ":000000 100644 0000000 0000000 A\0new.txt\0\0"
    "diff --git a/new.txt b/new.txt\n"
    "new file mode 100644\n"
    "index 0000000..e4f37c4\n"
    "--- /dev/null\n"
    "+++ b/new.txt\n"
    "@@ -0,0 +1,2 @@\n"
    "+hello\n"
    "+world\n"
)

MODIFIED_OUTPUT = (
    ":100644 100644 42969a8 0000000 M\0foo.txt\0\0"
    "diff --git a/foo.txt b/foo.txt\n"
    "index 42969a8..8db0ae5 100644\n"
    "--- a/foo.txt\n"
    "+++ b/foo.txt\n"
    "@@ -1,1 +1,1 @@\n"
    "-old\n"
    "+new\n"
)


def make_result(stdout: str, exit_code: int = 0) -> GitResult:
    """Create a GitResult instance for testing."""
    return GitResult(args=("git",), exit_code=exit_code, stdout=stdout)


class TestGitDiffService(unittest.TestCase):
    """Tests for GitDiffService request handling."""

    def setUp(self):
        self.mock_runner = AsyncMock()
        self.service = GitDiffService(runner=self.mock_runner, parser=DiffParser())

    def test_commit_diff_runs_log_in_repository(self):
        self.mock_runner.run.return_value = make_result(MODIFIED_OUTPUT)

        asyncio.run(self.service.get_commit_diff(REPO, FileChange(path="foo.txt"), "abc123"))

        self.mock_runner.run.assert_awaited_once_with(
            ["log", "abc123", "-m", "-1", "--first-parent", "--patch-with-raw", "-z", "--", "foo.txt"],
            Path("/repo"),
            success_exit_codes=frozenset({0}),
        )

    def test_commit_diff_parses_patch_section(self):
        self.mock_runner.run.return_value = make_result(MODIFIED_OUTPUT)

        diff = asyncio.run(
            self.service.get_commit_diff(REPO, FileChange(path="foo.txt"), "abc123")
        )

        self.assertIsInstance(diff, Diff)
        self.assertEqual(len(diff.hunks), 1)
        self.assertEqual(
            [line.line_type for line in diff.hunks[0].lines],
            [DiffLineType.REMOVED, DiffLineType.ADDED],
        )

    def test_new_file_is_single_all_added_hunk(self):
        self.mock_runner.run.return_value = make_result(NEW_FILE_OUTPUT, exit_code=1)
        change = WorkingDirectoryFileChange(path="new.txt", status=FileStatus.NEW)

        diff = asyncio.run(self.service.get_working_directory_diff(REPO, change))

        self.assertEqual(len(diff.hunks), 1)
        self.assertTrue(all(line.line_type == DiffLineType.ADDED for line in diff.hunks[0].lines))
        args, kwargs = self.mock_runner.run.call_args
        self.assertIn("--no-index", args[0])
        self.assertEqual(kwargs["success_exit_codes"], frozenset({0, 1}))

    def test_modified_file_references_head(self):
        self.mock_runner.run.return_value = make_result(MODIFIED_OUTPUT)
        change = WorkingDirectoryFileChange(path="foo.txt")

        asyncio.run(self.service.get_working_directory_diff(REPO, change))

        args, _ = self.mock_runner.run.call_args
        self.assertEqual(args[0][:2], ["diff", "HEAD"])

    def test_renamed_file_does_not_reference_head(self):
        self.mock_runner.run.return_value = make_result(MODIFIED_OUTPUT)
        change = WorkingDirectoryFileChange(path="foo.txt", status=FileStatus.RENAMED)

        asyncio.run(self.service.get_working_directory_diff(REPO, change))

        args, _ = self.mock_runner.run.call_args
        self.assertNotIn("HEAD", args[0])

    def test_empty_output_is_empty_diff(self):
        self.mock_runner.run.return_value = make_result("")

        diff = asyncio.run(
            self.service.get_working_directory_diff(REPO, WorkingDirectoryFileChange(path="foo.txt"))
        )

        self.assertTrue(diff.is_empty)

    def test_binary_output_is_not_diffable(self):
        self.mock_runner.run.return_value = make_result(
            "diff --git a/a.png b/a.png\nindex 1..2 100644\nBinary files a/a.png and b/a.png differ\n"
        )

        result = asyncio.run(
            self.service.get_commit_diff(REPO, FileChange(path="a.png"), "HEAD")
        )

        self.assertIsInstance(result, NotDiffable)
        self.assertEqual(result.reason, NotDiffableReason.BINARY)

    def test_tool_execution_error_propagates(self):
        self.mock_runner.run.side_effect = ToolExecutionError(["git", "diff"], 2, "fatal: bad")

        with self.assertRaises(ToolExecutionError) as ctx:
            asyncio.run(
                self.service.get_working_directory_diff(
                    REPO, WorkingDirectoryFileChange(path="new.txt", status=FileStatus.NEW)
                )
            )

        self.assertEqual(ctx.exception.exit_code, 2)

    def test_parse_error_propagates(self):
        self.mock_runner.run.return_value = make_result("diff --git a/x b/x\n@@ -1,z +1 @@\n+a\n")

        with self.assertRaises(ParseError):
            asyncio.run(self.service.get_commit_diff(REPO, FileChange(path="x"), "HEAD"))

    def test_concurrent_requests_are_independent(self):
        outputs = {"foo.txt": MODIFIED_OUTPUT, "new.txt": NEW_FILE_OUTPUT}

        async def fake_run(args, cwd, success_exit_codes=frozenset({0})):
            return make_result(outputs[args[-1]])

        self.mock_runner.run.side_effect = fake_run

        async def run_both():
            return await asyncio.gather(
                self.service.get_working_directory_diff(REPO, WorkingDirectoryFileChange(path="foo.txt")),
                self.service.get_working_directory_diff(
                    REPO, WorkingDirectoryFileChange(path="new.txt", status=FileStatus.NEW)
                ),
            )

        modified, new = asyncio.run(run_both())

        self.assertEqual(modified.new_path, "foo.txt")
        self.assertEqual(new.new_path, "new.txt")
        self.assertEqual(len(new.hunks[0].lines), 2)


if __name__ == "__main__":
    unittest.main()
