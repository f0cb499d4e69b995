"""Configuration for diff acquisition.

Settings come from an optional YAML file, then environment variables.
Parse-once pattern: raw mappings are validated into DiffSettings at the
boundary via the from_dict()/load() factory methods.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path

import yaml

from filediff.infrastructure.git.diff_parser import (
    DEFAULT_MAX_DIFF_SIZE,
    DEFAULT_MAX_LINE_COUNT,
    DiffParser,
)
from filediff.infrastructure.git.runner import GitCommandRunner

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILENAME = ".filediff.yml"

# Environment variable -> setting name
ENV_OVERRIDES = {
    "FILEDIFF_GIT_EXECUTABLE": "git_executable",
    "FILEDIFF_MAX_DIFF_SIZE": "max_diff_size",
    "FILEDIFF_MAX_LINE_COUNT": "max_line_count",
}


class ConfigError(Exception):
    """Raised when configuration cannot be loaded or is invalid."""

    pass


@dataclass(frozen=True)
class DiffSettings:
    """Tunable settings for running git and parsing its output."""

    git_executable: str = "git"
    max_diff_size: int = DEFAULT_MAX_DIFF_SIZE
    max_line_count: int = DEFAULT_MAX_LINE_COUNT

    # --------------------------------------------------------
    # Factory Methods
    # --------------------------------------------------------

    @classmethod
    def from_dict(cls, data: dict) -> DiffSettings:
        """Build settings from a mapping, validating each value.

        Args:
            data: Mapping of setting name to value; unknown keys are rejected

        Returns:
            DiffSettings with defaults for missing keys

        Raises:
            ConfigError: If a key is unknown or a value has the wrong type
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown settings: {', '.join(unknown)}")

        values = {}
        for name, value in data.items():
            if name == "git_executable":
                if not isinstance(value, str) or not value.strip():
                    raise ConfigError("git_executable must be a non-empty string")
                values[name] = value
            else:
                values[name] = _positive_int(name, value)
        return cls(**values)

    @classmethod
    def from_file(cls, path: str | Path) -> DiffSettings:
        """Load settings from a YAML file.

        Raises:
            ConfigError: If the file cannot be read or parsed
        """
        try:
            text = Path(path).read_text()
        except OSError as e:
            raise ConfigError(f"Cannot read config file {path}: {e}") from e

        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a mapping")
        return cls.from_dict(data)

    @classmethod
    def load(
        cls,
        config_path: str | Path | None = None,
        repo_path: str | Path = ".",
        environ: dict[str, str] | None = None,
    ) -> DiffSettings:
        """Load settings from file and environment.

        Uses config_path if given, otherwise `.filediff.yml` in the
        repository root when it exists. Environment variables win.

        Args:
            config_path: Explicit config file (must exist)
            repo_path: Repository root searched for the default file
            environ: Environment mapping (default: os.environ)

        Returns:
            Resolved DiffSettings
        """
        if config_path is not None:
            settings = cls.from_file(config_path)
        else:
            default_path = Path(repo_path) / DEFAULT_CONFIG_FILENAME
            if default_path.is_file():
                logger.debug("Loading settings from %s", default_path)
                settings = cls.from_file(default_path)
            else:
                settings = cls()
        return settings.with_env_overrides(os.environ if environ is None else environ)

    # --------------------------------------------------------
    # Public API
    # --------------------------------------------------------

    def with_env_overrides(self, environ: dict[str, str]) -> DiffSettings:
        """Return a copy with FILEDIFF_* environment variables applied."""
        overrides = {
            name: environ[var]
            for var, name in ENV_OVERRIDES.items()
            if environ.get(var)
        }
        if not overrides:
            return self
        validated = DiffSettings.from_dict(overrides)
        return replace(self, **{name: getattr(validated, name) for name in overrides})

    def create_parser(self) -> DiffParser:
        return DiffParser(max_diff_size=self.max_diff_size, max_line_count=self.max_line_count)

    def create_runner(self) -> GitCommandRunner:
        return GitCommandRunner(git_executable=self.git_executable)


def _positive_int(name: str, value: object) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"{name} must be a positive integer, got {value!r}")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be a positive integer, got {value!r}")
    if number <= 0:
        raise ConfigError(f"{name} must be a positive integer, got {value!r}")
    return number
