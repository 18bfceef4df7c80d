"""
Platform detection — map `uname -s` and PATH to a package manager.

    Darwin              → brew
    Linux + apt-get     → apt-get
    Linux + yum         → yum   (only if apt-get is absent)
    anything else       → unsupported
"""

from __future__ import annotations

import logging

from dotstrap.core.host import Host
from dotstrap.core.models.platform import OsKind, PackageManager, PlatformInfo

logger = logging.getLogger(__name__)

# Probe order matters: a box with both gets apt-get.
_LINUX_MANAGERS = (
    (PackageManager.APT, OsKind.LINUX_APT),
    (PackageManager.YUM, OsKind.LINUX_YUM),
)


def detect_platform(host: Host) -> PlatformInfo:
    """Classify the host. Never raises; check ``.supported``."""
    system = host.system

    if system == "Darwin":
        info = PlatformInfo(system=system, os_kind=OsKind.MACOS, package_manager=PackageManager.BREW)
    elif system == "Linux":
        info = PlatformInfo(
            system=system,
            os_kind=OsKind.UNSUPPORTED,
            detail="Unsupported Linux distribution",
        )
        for manager, kind in _LINUX_MANAGERS:
            if host.which(manager.value):
                info = PlatformInfo(system=system, os_kind=kind, package_manager=manager)
                break
    else:
        info = PlatformInfo(
            system=system,
            os_kind=OsKind.UNSUPPORTED,
            detail=f"Unsupported operating system: {system or 'unknown'}",
        )

    logger.info(
        "Platform: system=%s kind=%s manager=%s",
        info.system,
        info.os_kind.value,
        info.package_manager.value if info.package_manager else None,
    )
    return info
