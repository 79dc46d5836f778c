from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Iterable

from ..core.errors import JobError, JobFailedError
from ..core.logging_setup import format_fields

LOGGER = logging.getLogger(__name__)


class Command(ABC):
    @abstractmethod
    def run(self) -> int:
        raise NotImplementedError


class JobRunnerCommand(Command):
    """Runs an ordered list of jobs for one tool.

    A job that fails with continue-on-error set is logged as a warning and
    skipped. Any other failure aborts the run with a JobFailedError; no
    later job is started.
    """

    tool = ""

    def run(self) -> int:
        for job in self._jobs():
            self._call_job(job)
        return 0

    def _call_job(self, job: Any) -> None:
        try:
            self._run_job(job)
        except JobError as exc:
            if job.continue_on_error:
                LOGGER.warning(
                    "run %s job failed. Continuing... %s error=%s",
                    job.kind,
                    format_fields(job.log_fields()),
                    exc,
                )
                return
            raise JobFailedError(self.tool, job.kind, exc) from exc

    @abstractmethod
    def _jobs(self) -> Iterable[Any]:
        raise NotImplementedError

    @abstractmethod
    def _run_job(self, job: Any) -> None:
        raise NotImplementedError
