from __future__ import annotations

import platform
from dataclasses import dataclass
from importlib import metadata

DISTRIBUTION = "backup-and-sync"


@dataclass(frozen=True)
class VersionInformation:
    version: str
    python_version: str
    platform: str

    def describe(self) -> str:
        return (
            f"{DISTRIBUTION} version {self.version} "
            f"(python {self.python_version}, {self.platform})"
        )


def version_info() -> VersionInformation:
    try:
        version = metadata.version(DISTRIBUTION)
    except metadata.PackageNotFoundError:
        version = "dev"
    return VersionInformation(
        version=version,
        python_version=platform.python_version(),
        platform=f"{platform.system().lower()}/{platform.machine()}",
    )
