from __future__ import annotations

import logging
from itertools import chain
from typing import Iterable

from ..core.config import RcloneConfig, RcloneJob
from ..core.logging_setup import format_fields
from ..core.protocols import RcloneClientProtocol
from .base import JobRunnerCommand

LOGGER = logging.getLogger(__name__)

STATS_ARGS = ["--stats-log-level", "NOTICE", "--stats", "1m"]


def build_transfer_args(job: RcloneJob) -> list[str]:
    """Arguments for ``rclone copy`` and ``rclone sync``, which take the same flags."""
    args = [job.kind, job.source, job.destination]
    if job.bw_limit:
        args.extend(["--bwlimit", job.bw_limit])
    args.extend(STATS_ARGS)
    return args


class RcloneCommand(JobRunnerCommand):
    tool = "rclone"

    def __init__(self, config: RcloneConfig, rclone: RcloneClientProtocol) -> None:
        self._config = config
        self._rclone = rclone

    def _jobs(self) -> Iterable[RcloneJob]:
        return chain(self._config.copy, self._config.sync)

    def _run_job(self, job: RcloneJob) -> None:
        LOGGER.info("start run rclone %s %s", job.kind, format_fields(job.log_fields()))
        self._rclone.run(build_transfer_args(job))
        LOGGER.info("end run rclone %s", job.kind)
