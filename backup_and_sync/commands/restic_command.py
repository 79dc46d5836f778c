from __future__ import annotations

import logging
from itertools import chain
from typing import Iterable

from ..core.config import BackupJob, ForgetJob, Repository, ResticConfig, ResticJob
from ..core.errors import RepositoryNotFoundError
from ..core.logging_setup import format_fields
from ..core.protocols import ResticClientProtocol
from .base import JobRunnerCommand

LOGGER = logging.getLogger(__name__)


def build_backup_args(job: BackupJob, repo: Repository) -> list[str]:
    args = [job.kind, job.source, "--repo", repo.path]
    for pattern in job.exclude:
        args.extend(["--exclude", pattern])
    return args


def build_forget_args(job: ForgetJob, repo: Repository) -> list[str]:
    args = [job.kind, "--repo", repo.path]

    if job.hostname:
        args.extend(["--hostname", job.hostname])

    keep_policy = [
        ("--keep-last", job.keep_last),
        ("--keep-hourly", job.keep_hourly),
        ("--keep-daily", job.keep_daily),
        ("--keep-weekly", job.keep_weekly),
        ("--keep-monthly", job.keep_monthly),
        ("--keep-yearly", job.keep_yearly),
    ]
    for flag, count in keep_policy:
        if count > 0:
            args.extend([flag, str(count)])

    if job.keep_tag:
        args.extend(["--keep-tag", ",".join(job.keep_tag)])
    if job.tag:
        args.extend(["--tag", ",".join(job.tag)])
    if job.prune:
        args.append("--prune")
    return args


class ResticCommand(JobRunnerCommand):
    tool = "restic"

    def __init__(self, config: ResticConfig, restic: ResticClientProtocol) -> None:
        self._config = config
        self._restic = restic

    def _jobs(self) -> Iterable[ResticJob]:
        return chain(self._config.backups, self._config.forget)

    def _run_job(self, job: ResticJob) -> None:
        fields = format_fields(job.log_fields())
        LOGGER.info("start run restic %s %s", job.kind, fields)

        repo = self._config.repository(job.repository)
        if repo is None:
            raise RepositoryNotFoundError(job.repository)

        if isinstance(job, BackupJob):
            args = build_backup_args(job, repo)
        elif isinstance(job, ForgetJob):
            args = build_forget_args(job, repo)
        else:
            raise TypeError(f"Unsupported restic job: {job!r}")

        self._restic.run(args, repo.password)
        LOGGER.info("end run restic %s", job.kind)
