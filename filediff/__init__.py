"""filediff - retrieve and parse a single file's git diff.

Two contexts are supported: a historical commit's change relative to its
first parent, and the working directory's change relative to HEAD (or to
nothing, for new files). git's `--patch-with-raw -z` output is parsed into
a line-addressable Diff model.

Usage:
    python -m filediff <command> [options]
    filediff <command> [options]

Structure:
    filediff/
    ├── __main__.py          # Entry point dispatcher
    ├── logging.py           # CLI logging setup
    ├── domain/              # Domain models (parse-once pattern)
    │   ├── diff.py          # Diff, Hunk, DiffLine, NotDiffable
    │   └── file_change.py   # FileChange, FileStatus, Repository
    ├── services/            # Business logic services
    │   ├── git_diff.py      # Invocation builders + GitDiffService
    │   └── git_operations.py
    ├── infrastructure/      # External system interactions
    │   ├── config.py        # DiffSettings (YAML + environment)
    │   └── git/
    │       ├── runner.py    # Async git process runner
    │       └── diff_parser.py
    └── commands/            # Thin command orchestrators
        └── diff.py
"""
