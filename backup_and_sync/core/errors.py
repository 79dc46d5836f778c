from __future__ import annotations


class BackupAndSyncError(Exception):
    """Base class for every error raised by backup-and-sync."""


class ConfigError(BackupAndSyncError):
    """Raised when the configuration file cannot be found, parsed or validated."""


class JobError(BackupAndSyncError):
    """A single job failed. Subject to the job's continue-on-error policy."""


class RepositoryNotFoundError(JobError):
    def __init__(self, repository: str) -> None:
        super().__init__(f'repository "{repository}" does not exist')
        self.repository = repository


class ProcessLaunchError(JobError):
    def __init__(self, tool: str, reason: str) -> None:
        super().__init__(f"{tool} exec failed: {reason}")
        self.tool = tool


class ProcessExitError(JobError):
    def __init__(self, tool: str, returncode: int) -> None:
        super().__init__(f"{tool} exec failed: exit status {returncode}")
        self.tool = tool
        self.returncode = returncode


class JobFailedError(BackupAndSyncError):
    """A job without continue-on-error failed; the whole run is aborted."""

    def __init__(self, tool: str, kind: str, cause: JobError) -> None:
        super().__init__(f"run {kind} job failed: {cause}")
        self.tool = tool
        self.kind = kind
