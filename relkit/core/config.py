"""Project layout configuration.

The layout describes where a project keeps the pieces a release touches:
its version marker, release notes template, build command and output
directory. Defaults match a Go project built with ``make``; any of them can
be overridden from a ``relkit.toml`` file:

    [version]
    file = "version/version.go"
    pattern = 'Version = ".*-dev"'
    replacement = 'Version = "{version}"'

    [notes]
    template = "build/release/github-release-template.md"
    file = "github-release-{version}.md"

    [build]
    command = ["make", "clean", "test", "build"]
    output_dir = "bin"
    env = { USE_CONTAINER = "true" }

    [git]
    prod_remote = "remote.prod.url"
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import cast

from .result import Err, Ok, Result

__all__ = [
    "CONFIG_FILE_NAME",
    "ConfigError",
    "ProjectLayout",
    "load_layout",
    "load_layout_or_default",
]

CONFIG_FILE_NAME = "relkit.toml"

StrDict = dict[str, object]


def _default_build_command() -> tuple[str, ...]:
    return ("make", "clean", "test", "build")


def _default_build_env() -> dict[str, str]:
    return {"USE_CONTAINER": "true"}


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when the layout file cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class ProjectLayout:
    """Where the release-relevant files of a project live.

    Paths are relative to the repository root. ``{version}`` in
    ``version_replacement`` and ``notes_file`` is replaced with the bare
    version being released.
    """

    version_file: str = "version/version.go"
    version_pattern: str = 'Version = ".*-dev"'
    version_replacement: str = 'Version = "{version}"'
    notes_template: str = "build/release/github-release-template.md"
    notes_file: str = "github-release-{version}.md"
    output_dir: str = "bin"
    build_command: tuple[str, ...] = field(default_factory=_default_build_command)
    build_env: dict[str, str] = field(default_factory=_default_build_env)
    prod_remote: str = "remote.prod.url"

    def notes_file_for(self, version: str) -> str:
        return self.notes_file.replace("{version}", version)

    def replacement_for(self, version: str) -> str:
        return self.version_replacement.replace("{version}", version)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> ProjectLayout:
        """Create a layout from parsed TOML, falling back to defaults."""
        default = cls()
        version = _get_table(data, "version")
        notes = _get_table(data, "notes")
        build = _get_table(data, "build")
        git = _get_table(data, "git")

        command = _get_str_list(build, "command")
        env = _get_str_map(build, "env")

        return cls(
            version_file=_get_str(version, "file") or default.version_file,
            version_pattern=_get_str(version, "pattern") or default.version_pattern,
            version_replacement=_get_str(version, "replacement") or default.version_replacement,
            notes_template=_get_str(notes, "template") or default.notes_template,
            notes_file=_get_str(notes, "file") or default.notes_file,
            output_dir=_get_str(build, "output_dir") or default.output_dir,
            build_command=tuple(command) if command else default.build_command,
            build_env=env if env is not None else default.build_env,
            prod_remote=_get_str(git, "prod_remote") or default.prod_remote,
        )


def _get_table(table: Mapping[str, object], key: str) -> StrDict:
    value = table.get(key)
    if isinstance(value, dict):
        return cast(StrDict, value)
    return {}


def _get_str(table: Mapping[str, object], key: str) -> str | None:
    value = table.get(key)
    if not isinstance(value, str):
        return None
    return value.strip() or None


def _get_str_list(table: Mapping[str, object], key: str) -> list[str] | None:
    value = table.get(key)
    if not isinstance(value, list):
        return None
    items = cast(list[object], value)
    if not all(isinstance(item, str) for item in items):
        raise TypeError(f"{key} must be a list of strings")
    return [str(item) for item in items]


def _get_str_map(table: Mapping[str, object], key: str) -> dict[str, str] | None:
    value = table.get(key)
    if not isinstance(value, dict):
        return None
    raw = cast(dict[object, object], value)
    return {str(k): str(v) for k, v in raw.items()}


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and syntax errors."""
    import tomllib

    try:
        data: StrDict = tomllib.loads(path.read_bytes().decode("utf-8"))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_layout(path: Path) -> Result[ProjectLayout, ConfigError]:
    """Load a project layout from a TOML file.

    Args:
        path: Path to the layout file

    Returns:
        Ok(ProjectLayout) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        layout = ProjectLayout.from_dict(result.value)
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))

    try:
        re.compile(layout.version_pattern)
    except re.error as e:
        return Err(ConfigError(f"Invalid version pattern: {e}", path=path))

    if not layout.build_command:
        return Err(ConfigError("build.command must not be empty", path=path))

    return Ok(layout)


def load_layout_or_default(path: Path) -> Result[ProjectLayout, ConfigError]:
    """Load ``path`` if it exists, otherwise return the default layout."""
    if not path.exists():
        return Ok(ProjectLayout())
    return load_layout(path)
