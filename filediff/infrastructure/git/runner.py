"""Git command runner.

Infrastructure component that wraps subprocess calls to the git CLI.
This abstraction allows services to be tested without actually calling git.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Collection
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)

DEFAULT_SUCCESS_EXIT_CODES = frozenset({0})


class ToolExecutionError(Exception):
    """Raised when git exits with an unaccepted code or cannot be started."""

    def __init__(self, args: list[str], exit_code: int | None, stderr: str = ""):
        self.args_list = list(args)
        self.exit_code = exit_code
        self.stderr = stderr
        if exit_code is None:
            message = f"Failed to start: {' '.join(self.args_list)}"
        else:
            message = f"Command exited with code {exit_code}: {' '.join(self.args_list)}"
        if stderr.strip():
            message = f"{message}\n{stderr.strip()}"
        super().__init__(message)


@dataclass(frozen=True)
class GitResult:
    """Outcome of a git invocation whose exit code was accepted."""

    args: tuple[str, ...]
    exit_code: int
    stdout: str
    stderr: str = ""


class CommandRunner(Protocol):
    """Protocol for running git commands."""

    async def run(
        self,
        args: list[str],
        cwd: str | Path,
        success_exit_codes: Collection[int] = DEFAULT_SUCCESS_EXIT_CODES,
    ) -> GitResult:
        """Run git with args in cwd and return its output."""
        ...


@dataclass
class GitCommandRunner:
    """Runs git commands as child processes.

    This is the production implementation of CommandRunner.
    For testing, mock this class or use a fake implementation.
    """

    git_executable: str = "git"

    # --------------------------------------------------------
    # Public API
    # --------------------------------------------------------

    async def run(
        self,
        args: list[str],
        cwd: str | Path,
        success_exit_codes: Collection[int] = DEFAULT_SUCCESS_EXIT_CODES,
    ) -> GitResult:
        """Run a git command and wait for it to finish.

        If the awaiting task is cancelled, the child process is killed and
        whatever it wrote so far is dropped.

        Args:
            args: Git arguments, without the executable (e.g. ["diff", "HEAD"])
            cwd: Working directory for the command
            success_exit_codes: Exit codes that count as success

        Returns:
            GitResult with decoded stdout/stderr

        Raises:
            ToolExecutionError: If git cannot be started or exits with a
                code outside success_exit_codes
        """
        cmd = [self.git_executable, *args]
        logger.debug("Running %s in %s", " ".join(cmd), cwd)

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                cwd=str(cwd),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            logger.warning("Could not start %s: %s", self.git_executable, e)
            raise ToolExecutionError(cmd, None, str(e)) from e

        try:
            stdout, stderr = await process.communicate()
        except asyncio.CancelledError:
            if process.returncode is None:
                try:
                    process.kill()
                except ProcessLookupError:
                    pass
                await process.wait()
            raise

        exit_code = process.returncode
        stdout_text = stdout.decode("utf-8", errors="replace")
        stderr_text = stderr.decode("utf-8", errors="replace")

        if exit_code not in success_exit_codes:
            logger.warning("Command failed with exit code %s: %s", exit_code, " ".join(cmd))
            raise ToolExecutionError(cmd, exit_code, stderr_text)

        return GitResult(
            args=tuple(cmd),
            exit_code=exit_code,
            stdout=stdout_text,
            stderr=stderr_text,
        )
