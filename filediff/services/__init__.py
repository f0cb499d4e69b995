"""Services for filediff.

Services encapsulate business logic and orchestrate domain models.
They receive dependencies via constructor injection.
"""

from filediff.services.git_diff import (
    GitDiffService,
    GitInvocation,
    build_commit_diff_invocation,
    build_working_directory_diff_invocation,
)
from filediff.services.git_operations import GitOperationsService, GitRepositoryError

__all__ = [
    "GitDiffService",
    "GitInvocation",
    "GitOperationsService",
    "GitRepositoryError",
    "build_commit_diff_invocation",
    "build_working_directory_diff_invocation",
]
