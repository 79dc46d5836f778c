from __future__ import annotations

import logging
import os
import subprocess
from typing import Mapping, Sequence

from .errors import ProcessExitError, ProcessLaunchError

LOGGER = logging.getLogger(__name__)

PASSWORD_ENV = "RESTIC_PASSWORD"


class ResticClient:
    def __init__(
        self,
        executable: str = "restic",
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._executable = executable
        self._environ = environ

    def run(self, args: Sequence[str], password: str) -> None:
        arguments = list(args)
        LOGGER.info("Executing restic command: %s", arguments)

        cmd = [self._executable, *arguments]
        try:
            result = subprocess.run(cmd, env=self._build_env(password), check=False)
        except OSError as exc:
            raise ProcessLaunchError("restic", str(exc)) from exc

        if result.returncode != 0:
            raise ProcessExitError("restic", result.returncode)
        LOGGER.info("restic exited with return code 0")

    def _build_env(self, password: str) -> dict[str, str]:
        env = dict(os.environ if self._environ is None else self._environ)
        env[PASSWORD_ENV] = password
        return env
