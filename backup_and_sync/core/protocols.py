from __future__ import annotations

from typing import Protocol, Sequence


class ResticClientProtocol(Protocol):
    def run(self, args: Sequence[str], password: str) -> None:
        ...


class RcloneClientProtocol(Protocol):
    def run(self, args: Sequence[str]) -> None:
        ...
