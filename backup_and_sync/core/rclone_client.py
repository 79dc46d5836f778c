from __future__ import annotations

import logging
import subprocess
from typing import Sequence

from .errors import ProcessExitError, ProcessLaunchError

LOGGER = logging.getLogger(__name__)


class RcloneClient:
    """Runs rclone with stdout inherited and stderr forwarded to the logger.

    rclone prints its periodic transfer stats on stderr, so each line is
    re-emitted as an INFO record instead of going straight to the terminal.
    """

    def __init__(self, executable: str = "rclone") -> None:
        self._executable = executable

    def run(self, args: Sequence[str]) -> None:
        arguments = list(args)
        LOGGER.info("Executing rclone command: %s", arguments)

        cmd = [self._executable, *arguments]
        try:
            process = subprocess.Popen(
                cmd,
                stderr=subprocess.PIPE,
                text=True,
                errors="replace",
            )
        except OSError as exc:
            raise ProcessLaunchError("rclone", str(exc)) from exc

        with process:
            if process.stderr is not None:
                for line in process.stderr:
                    line = line.rstrip()
                    if line:
                        LOGGER.info("%s", line)
            returncode = process.wait()

        if returncode != 0:
            raise ProcessExitError("rclone", returncode)
        LOGGER.info("rclone exited with return code 0")
