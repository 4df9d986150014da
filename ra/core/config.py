"""Project configuration from ``.releaseagent.toml``.

The file is parsed once per run into a frozen
``Config`` which is then passed explicitly to every component that needs it.
Nothing reads configuration from module globals.

Example:
    [ci]
    poll_interval = 10
    timeout = 600

    [release]
    remote = "origin"
    changelog_command = "schangelog generate"

    [areas.qa]
    commands = [
        { id = "tests", run = "pytest -q" },
        { id = "lint", run = ["ruff", "check", "."], warn_only = true },
    ]
"""

from __future__ import annotations

import shlex
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import (
    StrDict,
    as_str_dict,
    get_bool,
    get_float,
    get_list,
    get_str,
    get_table,
)

__all__ = [
    "CONFIG_FILENAME",
    "AreaConfig",
    "CIConfig",
    "CommandSpec",
    "Config",
    "ConfigError",
    "ReleaseConfig",
    "load_config",
    "load_config_or_default",
]

CONFIG_FILENAME = ".releaseagent.toml"

DEFAULT_CI_POLL_INTERVAL_SECONDS = 10.0
DEFAULT_CI_TIMEOUT_SECONDS = 10 * 60.0
DEFAULT_COMMIT_MESSAGE = "chore(release): {version}"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """The config file could not be read, parsed or validated."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class CommandSpec:
    """An external command run as one check of an area.

    Attributes:
        id: Check id reported in the team section (e.g. "tests")
        argv: Command and arguments
        warn_only: Report a failing exit status as WARN instead of NO-GO
    """

    id: str
    argv: tuple[str, ...]
    warn_only: bool = False


@dataclass(frozen=True, slots=True)
class AreaConfig:
    enabled: bool = True
    commands: tuple[CommandSpec, ...] = ()


@dataclass(frozen=True, slots=True)
class CIConfig:
    enabled: bool = True
    poll_interval: float = DEFAULT_CI_POLL_INTERVAL_SECONDS
    timeout: float = DEFAULT_CI_TIMEOUT_SECONDS


@dataclass(frozen=True, slots=True)
class ReleaseConfig:
    remote: str = "origin"
    commit_message: str = DEFAULT_COMMIT_MESSAGE
    changelog_command: tuple[str, ...] | None = None
    roadmap_command: tuple[str, ...] | None = None


def _empty_areas() -> dict[str, AreaConfig]:
    return {}


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    ci: CIConfig = field(default_factory=CIConfig)
    release: ReleaseConfig = field(default_factory=ReleaseConfig)
    areas: dict[str, AreaConfig] = field(default_factory=_empty_areas)

    def area(self, area_id: str) -> AreaConfig:
        """Return the config for an area, defaulting to enabled with no commands."""
        return self.areas.get(area_id, AreaConfig())

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a mapping (parsed TOML).

        Raises:
            ValueError: If a command entry is malformed.
        """
        ci: StrDict = get_table(data, "ci") or {}
        release: StrDict = get_table(data, "release") or {}
        areas: StrDict = get_table(data, "areas") or {}

        poll_interval = get_float(ci, "poll_interval")
        timeout = get_float(ci, "timeout")
        if poll_interval is not None and poll_interval <= 0:
            raise ValueError("[ci].poll_interval must be positive")
        if timeout is not None and timeout <= 0:
            raise ValueError("[ci].timeout must be positive")

        parsed_areas: dict[str, AreaConfig] = {}
        for area_id, raw in areas.items():
            table = as_str_dict(raw)
            if table is None:
                raise ValueError(f"[areas.{area_id}] must be a table")
            parsed_areas[area_id] = _parse_area(area_id, table)

        enabled = get_bool(ci, "enabled")
        return cls(
            ci=CIConfig(
                enabled=True if enabled is None else enabled,
                poll_interval=poll_interval or DEFAULT_CI_POLL_INTERVAL_SECONDS,
                timeout=timeout or DEFAULT_CI_TIMEOUT_SECONDS,
            ),
            release=ReleaseConfig(
                remote=get_str(release, "remote") or "origin",
                commit_message=get_str(release, "commit_message") or DEFAULT_COMMIT_MESSAGE,
                changelog_command=_parse_argv(release.get("changelog_command")),
                roadmap_command=_parse_argv(release.get("roadmap_command")),
            ),
            areas=parsed_areas,
        )


def _parse_argv(value: object) -> tuple[str, ...] | None:
    """Accept a shell-like string or a list of strings."""
    if isinstance(value, str):
        argv = tuple(shlex.split(value))
        return argv or None
    if isinstance(value, list):
        items = [item for item in value if isinstance(item, str) and item]
        if len(items) != len(value):
            raise ValueError(f"command list must contain only strings: {value!r}")
        return tuple(items) or None
    return None


def _parse_area(area_id: str, table: StrDict) -> AreaConfig:
    commands: list[CommandSpec] = []
    for raw in get_list(table, "commands") or []:
        entry = as_str_dict(raw)
        if entry is None:
            raise ValueError(f"[areas.{area_id}].commands entries must be tables")
        check_id = get_str(entry, "id")
        argv = _parse_argv(entry.get("run"))
        if check_id is None or argv is None:
            raise ValueError(f"[areas.{area_id}].commands entries need 'id' and 'run'")
        commands.append(
            CommandSpec(id=check_id, argv=argv, warn_only=get_bool(entry, "warn_only") or False)
        )

    enabled = get_bool(table, "enabled")
    return AreaConfig(enabled=True if enabled is None else enabled, commands=tuple(commands))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Read ``path`` and build a ``Config``.

    Unreadable files, TOML syntax errors and values that fail validation all
    come back as ``ConfigError`` naming the file.
    """
    try:
        raw: object = tomllib.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return Err(ConfigError(f"{path}: not found", path=path))
    except (OSError, UnicodeDecodeError) as e:
        return Err(ConfigError(f"{path}: cannot read: {e}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"{path}: invalid TOML: {e}", path=path))

    data = as_str_dict(raw)
    if data is None:
        return Err(ConfigError(f"{path}: top level must be a table", path=path))
    try:
        return Ok(Config.from_dict(data))
    except (TypeError, ValueError) as e:
        return Err(ConfigError(f"{path}: {e}", path=path))


def load_config_or_default(directory: Path) -> Result[Config, ConfigError]:
    """Load ``<directory>/.releaseagent.toml``, or defaults when the file is absent.

    A file that exists but does not parse is still reported as an error.
    """
    path = directory / CONFIG_FILENAME
    if not path.is_file():
        return Ok(Config())
    return load_config(path)
