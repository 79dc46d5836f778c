from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence

import pytest

from backup_and_sync.core.config import (
    BackupJob,
    CopyJob,
    ForgetJob,
    RcloneConfig,
    Repository,
    ResticConfig,
    SyncJob,
)
from backup_and_sync.core.errors import ProcessExitError
from backup_and_sync.core.logging_setup import LOGGER_NAME


class RecordingRestic:
    """Records restic invocations; fails any call whose args contain a marker."""

    def __init__(self, fail_on: Sequence[str] = ()) -> None:
        self.fail_on = set(fail_on)
        self.calls: list[list[str]] = []
        self.passwords: list[str] = []

    def run(self, args: Sequence[str], password: str) -> None:
        current = list(args)
        self.calls.append(current)
        self.passwords.append(password)
        if self.fail_on.intersection(current):
            raise ProcessExitError("restic", 1)


class RecordingRclone:
    def __init__(self, fail_on: Sequence[str] = ()) -> None:
        self.fail_on = set(fail_on)
        self.calls: list[list[str]] = []

    def run(self, args: Sequence[str]) -> None:
        current = list(args)
        self.calls.append(current)
        if self.fail_on.intersection(current):
            raise ProcessExitError("rclone", 3)


@pytest.fixture(autouse=True)
def reset_package_logger() -> Iterator[None]:
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def restic_config() -> ResticConfig:
    return ResticConfig(
        repositories=[
            Repository("local", "/srv/restic/local", "local-secret"),
            Repository("offsite", "sftp:backup@host:/restic", "offsite-secret"),
        ],
        backups=[
            BackupJob("home", "local", "/home", ["*.tmp", ".cache"]),
            BackupJob("etc", "offsite", "/etc"),
        ],
        forget=[
            ForgetJob("local", prune=True, keep_daily=7, keep_weekly=4),
        ],
    )


@pytest.fixture
def rclone_config() -> RcloneConfig:
    return RcloneConfig(
        copy=[CopyJob("/srv/photos", "remote:photos", bw_limit="10M")],
        sync=[SyncJob("/srv/docs", "remote:docs")],
    )
