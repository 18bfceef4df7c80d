"""
Platform model — which OS we are on and how it installs packages.

Computed once by the platform detection step and frozen afterwards.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class OsKind(str, Enum):
    MACOS = "macOS"
    LINUX_APT = "Linux-apt"
    LINUX_YUM = "Linux-yum"
    UNSUPPORTED = "Unsupported"


class PackageManager(str, Enum):
    BREW = "brew"
    APT = "apt-get"
    YUM = "yum"


class PlatformInfo(BaseModel):
    """Detected platform. Immutable once built."""

    model_config = ConfigDict(frozen=True)

    system: str                                 # raw `uname -s`
    os_kind: OsKind
    package_manager: PackageManager | None = None
    detail: str = ""                            # why it is unsupported, if it is

    @property
    def supported(self) -> bool:
        return self.os_kind is not OsKind.UNSUPPORTED and self.package_manager is not None
