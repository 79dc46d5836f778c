"""Configuration objects for restic and rclone jobs.

Each dataclass is built from the mapping produced by the config loader via
``from_dict``. File keys are hyphenated (``continue-on-error``,
``keep-daily``, ``bw-limit``); attribute names use underscores.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Union

from .errors import ConfigError

_TRUE_STRINGS = {"true", "yes", "on", "1"}
_FALSE_STRINGS = {"false", "no", "off", "0", ""}


def _section(data: Any, where: str) -> Mapping[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ConfigError(f"{where} must be a mapping")
    return data


def _entries(data: Mapping[str, Any], key: str, where: str) -> list[Mapping[str, Any]]:
    raw = data.get(key)
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ConfigError(f"{where}.{key} must be a list")
    return [_section(item, f"{where}.{key}[{index}]") for index, item in enumerate(raw)]


def _string(data: Mapping[str, Any], key: str, where: str, *, required: bool = False) -> str:
    value = data.get(key)
    if value is None:
        value = ""
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise ConfigError(f"{where}.{key} must be a string")
    value = str(value)
    if required and not value:
        raise ConfigError(f"{where}.{key} is required")
    return value


def _string_list(data: Mapping[str, Any], key: str, where: str) -> list[str]:
    value = data.get(key)
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list) or not all(isinstance(item, (str, int)) for item in value):
        raise ConfigError(f"{where}.{key} must be a list of strings")
    return [str(item) for item in value]


def _count(data: Mapping[str, Any], key: str, where: str) -> int:
    value = data.get(key, 0)
    if value is None:
        return 0
    if isinstance(value, bool):
        raise ConfigError(f"{where}.{key} must be an integer")
    if isinstance(value, float) and not value.is_integer():
        raise ConfigError(f"{where}.{key} must be an integer, got {value!r}")
    try:
        number = int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{where}.{key} must be an integer, got {value!r}") from exc
    if number < 0:
        raise ConfigError(f"{where}.{key} must not be negative")
    return number


def _flag(data: Mapping[str, Any], key: str, where: str) -> bool:
    value = data.get(key, False)
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    text = str(value).strip().lower()
    if text in _TRUE_STRINGS:
        return True
    if text in _FALSE_STRINGS:
        return False
    raise ConfigError(f"{where}.{key} must be a boolean, got {value!r}")


@dataclass(frozen=True)
class Repository:
    repository: str
    path: str
    password: str = field(default="", repr=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], where: str = "repository") -> "Repository":
        return cls(
            repository=_string(data, "repository", where, required=True),
            path=_string(data, "path", where, required=True),
            password=_string(data, "password", where),
        )


@dataclass(frozen=True)
class BackupJob:
    backup: str
    repository: str
    source: str
    exclude: list[str] = field(default_factory=list)
    continue_on_error: bool = False

    kind = "backup"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], where: str = "backup") -> "BackupJob":
        return cls(
            backup=_string(data, "backup", where),
            repository=_string(data, "repository", where, required=True),
            source=_string(data, "source", where, required=True),
            exclude=_string_list(data, "exclude", where),
            continue_on_error=_flag(data, "continue-on-error", where),
        )

    def log_fields(self) -> dict[str, object]:
        return {
            "backup": self.backup,
            "repository": self.repository,
            "source": self.source,
            "exclude": self.exclude,
        }


@dataclass(frozen=True)
class ForgetJob:
    repository: str
    prune: bool = False
    keep_last: int = 0
    keep_hourly: int = 0
    keep_daily: int = 0
    keep_weekly: int = 0
    keep_monthly: int = 0
    keep_yearly: int = 0
    keep_tag: list[str] = field(default_factory=list)
    tag: list[str] = field(default_factory=list)
    hostname: str = ""
    continue_on_error: bool = False

    kind = "forget"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], where: str = "forget") -> "ForgetJob":
        return cls(
            repository=_string(data, "repository", where, required=True),
            prune=_flag(data, "prune", where),
            keep_last=_count(data, "keep-last", where),
            keep_hourly=_count(data, "keep-hourly", where),
            keep_daily=_count(data, "keep-daily", where),
            keep_weekly=_count(data, "keep-weekly", where),
            keep_monthly=_count(data, "keep-monthly", where),
            keep_yearly=_count(data, "keep-yearly", where),
            keep_tag=_string_list(data, "keep-tag", where),
            tag=_string_list(data, "tag", where),
            hostname=_string(data, "hostname", where),
            continue_on_error=_flag(data, "continue-on-error", where),
        )

    def log_fields(self) -> dict[str, object]:
        return {
            "repository": self.repository,
            "hostname": self.hostname,
            "prune": self.prune,
        }


@dataclass(frozen=True)
class CopyJob:
    source: str
    destination: str
    bw_limit: str = ""
    continue_on_error: bool = False

    kind = "copy"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], where: str = "copy") -> "CopyJob":
        return cls(
            source=_string(data, "source", where, required=True),
            destination=_string(data, "destination", where, required=True),
            bw_limit=_string(data, "bw-limit", where),
            continue_on_error=_flag(data, "continue-on-error", where),
        )

    def log_fields(self) -> dict[str, object]:
        return {"source": self.source, "destination": self.destination}


@dataclass(frozen=True)
class SyncJob(CopyJob):
    kind = "sync"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], where: str = "sync") -> "SyncJob":
        return cls(
            source=_string(data, "source", where, required=True),
            destination=_string(data, "destination", where, required=True),
            bw_limit=_string(data, "bw-limit", where),
            continue_on_error=_flag(data, "continue-on-error", where),
        )


ResticJob = Union[BackupJob, ForgetJob]
RcloneJob = Union[CopyJob, SyncJob]


@dataclass(frozen=True)
class ResticConfig:
    repositories: list[Repository] = field(default_factory=list)
    backups: list[BackupJob] = field(default_factory=list)
    forget: list[ForgetJob] = field(default_factory=list)
    executable: str = "restic"

    @classmethod
    def from_dict(cls, data: Any) -> "ResticConfig":
        section = _section(data, "restic")
        repositories = [
            Repository.from_dict(item, f"restic.repositories[{index}]")
            for index, item in enumerate(_entries(section, "repositories", "restic"))
        ]
        seen: set[str] = set()
        for repo in repositories:
            if repo.repository in seen:
                raise ConfigError(f'duplicate repository identifier "{repo.repository}"')
            seen.add(repo.repository)

        return cls(
            repositories=repositories,
            backups=[
                BackupJob.from_dict(item, f"restic.backups[{index}]")
                for index, item in enumerate(_entries(section, "backups", "restic"))
            ],
            forget=[
                ForgetJob.from_dict(item, f"restic.forget[{index}]")
                for index, item in enumerate(_entries(section, "forget", "restic"))
            ],
            executable=_string(section, "executable", "restic") or "restic",
        )

    def repository(self, identifier: str) -> Repository | None:
        for repo in self.repositories:
            if repo.repository == identifier:
                return repo
        return None


@dataclass(frozen=True)
class RcloneConfig:
    copy: list[CopyJob] = field(default_factory=list)
    sync: list[SyncJob] = field(default_factory=list)
    executable: str = "rclone"

    @classmethod
    def from_dict(cls, data: Any) -> "RcloneConfig":
        section = _section(data, "rclone")
        return cls(
            copy=[
                CopyJob.from_dict(item, f"rclone.copy[{index}]")
                for index, item in enumerate(_entries(section, "copy", "rclone"))
            ],
            sync=[
                SyncJob.from_dict(item, f"rclone.sync[{index}]")
                for index, item in enumerate(_entries(section, "sync", "rclone"))
            ],
            executable=_string(section, "executable", "rclone") or "rclone",
        )


@dataclass(frozen=True)
class AppConfig:
    restic: ResticConfig | None = None
    rclone: RcloneConfig | None = None
    source: Path | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], source: Path | None = None) -> "AppConfig":
        # A section that is present but empty still enables that tool.
        return cls(
            restic=ResticConfig.from_dict(data["restic"]) if "restic" in data else None,
            rclone=RcloneConfig.from_dict(data["rclone"]) if "rclone" in data else None,
            source=source,
        )
