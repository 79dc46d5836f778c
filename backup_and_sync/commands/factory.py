from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from ..core.config import AppConfig, RcloneConfig, ResticConfig
from ..core.config_loader import ConfigLoader
from ..core.protocols import RcloneClientProtocol, ResticClientProtocol
from ..core.rclone_client import RcloneClient
from ..core.restic_client import ResticClient
from .base import Command
from .rclone_command import RcloneCommand
from .restic_command import ResticCommand
from .run_all_command import RunAllCommand

LOGGER = logging.getLogger(__name__)

ACTIONS = ("run", "backup", "restic", "rclone")
# "backup" runs the same jobs as "run".
ACTION_ALIASES = {"backup": "run"}


class CommandFactory:
    def __init__(
        self,
        search_dir: Path,
        *,
        config_loader: ConfigLoader | None = None,
        restic_client_factory: Callable[[str], ResticClientProtocol] | None = None,
        rclone_client_factory: Callable[[str], RcloneClientProtocol] | None = None,
    ) -> None:
        self._config_loader = config_loader or ConfigLoader(search_dir)
        self._restic_client_factory = restic_client_factory or ResticClient
        self._rclone_client_factory = rclone_client_factory or RcloneClient

    def create(self, action: str, config_path: str | None) -> Command:
        if action not in ACTIONS:
            raise SystemExit(f"Unsupported action: {action}")

        action = ACTION_ALIASES.get(action, action)
        config = self._config_loader.load(config_path)
        commands: list[Command] = []

        if action in ("run", "restic"):
            self._add_restic(config, commands)
        if action in ("run", "rclone"):
            self._add_rclone(config, commands)
        return RunAllCommand(commands)

    def _add_restic(self, config: AppConfig, commands: list[Command]) -> None:
        if config.restic is None:
            LOGGER.info("No restic configuration found, skipping restic jobs")
            return
        commands.append(self._restic_command(config.restic))

    def _add_rclone(self, config: AppConfig, commands: list[Command]) -> None:
        if config.rclone is None:
            LOGGER.info("No rclone configuration found, skipping rclone jobs")
            return
        commands.append(self._rclone_command(config.rclone))

    def _restic_command(self, config: ResticConfig) -> ResticCommand:
        return ResticCommand(config, self._restic_client_factory(config.executable))

    def _rclone_command(self, config: RcloneConfig) -> RcloneCommand:
        return RcloneCommand(config, self._rclone_client_factory(config.executable))
