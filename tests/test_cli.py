"""Tests for the argparse entry point."""

from __future__ import annotations

import io
import unittest
from unittest.mock import patch

from filediff.__main__ import build_parser, main


class TestCli(unittest.TestCase):
    """Tests for command routing in main()."""

    def test_no_command_prints_help(self):
        with patch("sys.stdout", new_callable=io.StringIO) as stdout:
            exit_code = main([])

        self.assertEqual(exit_code, 1)
        self.assertIn("usage: filediff", stdout.getvalue())

    def test_commit_routes_arguments(self):
        with patch("filediff.__main__.cmd_commit_diff", return_value=0) as mock_cmd:
            exit_code = main(["commit", "HEAD~1", "src/app.py", "--repo", "/repo", "--format", "text"])

        self.assertEqual(exit_code, 0)
        mock_cmd.assert_called_once_with(
            commitish="HEAD~1",
            file_path="src/app.py",
            repo_path="/repo",
            output_format="text",
            annotate_lines=False,
            config_path=None,
        )

    def test_working_routes_arguments(self):
        with patch("filediff.__main__.cmd_working_diff", return_value=0) as mock_cmd:
            main(["working", "new.txt", "--status", "new", "--annotate-lines"])

        mock_cmd.assert_called_once_with(
            file_path="new.txt",
            status="new",
            repo_path=".",
            output_format="json",
            annotate_lines=True,
            config_path=None,
        )

    def test_parse_routes_arguments(self):
        with patch("filediff.__main__.cmd_parse_diff", return_value=1) as mock_cmd:
            exit_code = main(["parse", "--input-file", "out.raw", "--config", "cfg.yml"])

        self.assertEqual(exit_code, 1)
        mock_cmd.assert_called_once_with(
            input_file="out.raw",
            output_format="json",
            annotate_lines=False,
            config_path="cfg.yml",
        )

    def test_status_choices_match_file_status(self):
        parser = build_parser()

        with patch("sys.stderr", new_callable=io.StringIO):
            with self.assertRaises(SystemExit):
                parser.parse_args(["working", "foo.txt", "--status", "untracked"])


if __name__ == "__main__":
    unittest.main()
