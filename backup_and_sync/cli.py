#!/usr/bin/env python3

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from .commands.factory import ACTIONS, CommandFactory
from .core.errors import ConfigError, JobFailedError
from .core.logging_setup import setup_logging
from .core.version import version_info

LOGGER = logging.getLogger(__name__)


class CliApplication:
    def __init__(self, search_dir: Path) -> None:
        self._factory = CommandFactory(search_dir)

    def build_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog="backup-and-sync",
            description="Backup directories using restic and sync folders using rclone",
        )
        parser.add_argument(
            "action",
            nargs="?",
            choices=ACTIONS,
            default="run",
            help="Jobs to run (default: run, restic jobs then rclone jobs)",
        )
        parser.add_argument(
            "--config",
            default=None,
            help="config file (default is ./backup.config)",
        )
        parser.add_argument(
            "--log-level",
            default="INFO",
            choices=["DEBUG", "INFO", "WARNING", "ERROR"],
            type=str.upper,
        )
        parser.add_argument(
            "--log-file",
            type=Path,
            default=None,
            help="Also write log records to this file (rotated)",
        )
        parser.add_argument(
            "--version",
            action="version",
            version=version_info().describe(),
        )
        return parser

    def run(self, argv: list[str] | None = None) -> int:
        args = self.build_parser().parse_args(argv)
        setup_logging(args.log_level, args.log_file)
        LOGGER.info("%s", version_info().describe())

        try:
            command = self._factory.create(args.action, args.config)
        except ConfigError as exc:
            LOGGER.error("Reading config file failed: %s", exc)
            return 1

        try:
            return command.run()
        except JobFailedError as exc:
            LOGGER.error("%s execution failed: %s", exc.tool, exc)
            return 1


def main() -> int:
    app = CliApplication(Path.cwd())
    return app.run()


if __name__ == "__main__":
    raise SystemExit(main())
