from __future__ import annotations

from typing import Sequence

from .base import Command


class RunAllCommand(Command):
    def __init__(self, commands: Sequence[Command]) -> None:
        self._commands = list(commands)

    def run(self) -> int:
        for command in self._commands:
            result = command.run()
            if result != 0:
                return result
        return 0
