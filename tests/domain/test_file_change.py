"""Tests for FileStatus parsing and file change models."""

from __future__ import annotations

import unittest
from pathlib import Path

from filediff.domain.file_change import (
    FileChange,
    FileStatus,
    Repository,
    WorkingDirectoryFileChange,
)


class TestFileStatusFromString(unittest.TestCase):
    """Tests for FileStatus.from_string()."""

    def test_parses_case_insensitively(self):
        self.assertEqual(FileStatus.from_string("new"), FileStatus.NEW)
        self.assertEqual(FileStatus.from_string("Renamed"), FileStatus.RENAMED)
        self.assertEqual(FileStatus.from_string("MODIFIED"), FileStatus.MODIFIED)

    def test_invalid_value_lists_choices(self):
        with self.assertRaises(ValueError) as ctx:
            FileStatus.from_string("untracked")

        self.assertIn("Invalid file status: untracked", str(ctx.exception))
        self.assertIn("renamed", str(ctx.exception))


class TestFileStatusFromPorcelain(unittest.TestCase):
    """Tests for FileStatus.from_porcelain()."""

    def test_untracked_is_new(self):
        self.assertEqual(FileStatus.from_porcelain("??"), FileStatus.NEW)

    def test_added_is_new(self):
        self.assertEqual(FileStatus.from_porcelain("A "), FileStatus.NEW)
        self.assertEqual(FileStatus.from_porcelain("AM"), FileStatus.NEW)

    def test_renamed(self):
        self.assertEqual(FileStatus.from_porcelain("R "), FileStatus.RENAMED)
        self.assertEqual(FileStatus.from_porcelain("RM"), FileStatus.RENAMED)

    def test_copied(self):
        self.assertEqual(FileStatus.from_porcelain("C "), FileStatus.COPIED)

    def test_deleted(self):
        self.assertEqual(FileStatus.from_porcelain(" D"), FileStatus.DELETED)
        self.assertEqual(FileStatus.from_porcelain("D "), FileStatus.DELETED)

    def test_added_then_deleted_from_working_tree(self):
        self.assertEqual(FileStatus.from_porcelain("AD"), FileStatus.DELETED)
        self.assertEqual(FileStatus.from_porcelain("RD"), FileStatus.DELETED)

    def test_conflicted(self):
        for code in ("UU", "AA", "DD", "AU", "UD"):
            with self.subTest(code=code):
                self.assertEqual(FileStatus.from_porcelain(code), FileStatus.CONFLICTED)

    def test_modified_is_default(self):
        self.assertEqual(FileStatus.from_porcelain(" M"), FileStatus.MODIFIED)
        self.assertEqual(FileStatus.from_porcelain("M "), FileStatus.MODIFIED)
        self.assertEqual(FileStatus.from_porcelain("MM"), FileStatus.MODIFIED)


class TestFileChanges(unittest.TestCase):
    """Tests for FileChange, WorkingDirectoryFileChange and Repository."""

    def test_working_directory_change_defaults_to_modified(self):
        change = WorkingDirectoryFileChange(path="foo.txt")

        self.assertEqual(change.status, FileStatus.MODIFIED)
        self.assertIsInstance(change, FileChange)

    def test_repository_from_string_resolves(self):
        repository = Repository.from_string(".")

        self.assertTrue(repository.path.is_absolute())
        self.assertEqual(repository.path, Path(".").resolve())


if __name__ == "__main__":
    unittest.main()
