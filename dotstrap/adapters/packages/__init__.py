"""Package-manager adapters (brew, apt-get, yum)."""

from dotstrap.adapters.packages.installers import (
    AptInstaller,
    BrewInstaller,
    PackageInstaller,
    YumInstaller,
    all_installers,
)

__all__ = [
    "AptInstaller",
    "BrewInstaller",
    "PackageInstaller",
    "YumInstaller",
    "all_installers",
]
