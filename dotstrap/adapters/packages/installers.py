"""
Package installers — one adapter per package manager.

The install step does not branch on the package manager's name: it
addresses the adapter registered under ``PlatformInfo.package_manager``
and each variant knows its own commands.

    brew      brew install <pkg>
    apt-get   sudo apt-get update && sudo apt-get install -y <pkg>
    yum       sudo yum install -y <pkg>
"""

from __future__ import annotations

import logging
import shutil
from abc import abstractmethod
from typing import Callable

from dotstrap.adapters.base import Adapter, ExecutionContext
from dotstrap.adapters.shell.runner import Runner, format_argv, run_subprocess
from dotstrap.core.models.action import Receipt
from dotstrap.core.models.platform import PackageManager

logger = logging.getLogger(__name__)

Which = Callable[[str], str | None]


class PackageInstaller(Adapter):
    """Base for package-manager adapters.

    Action params:
        package (str): Package to install. Also the command name whose
            presence on PATH means "already installed".
        command (str): Command to probe, if it differs from the package.
    """

    manager: PackageManager
    needs_sudo: bool = True

    def __init__(self, runner: Runner = run_subprocess, which: Which = shutil.which):
        self._run = runner
        self._which = which

    @property
    def name(self) -> str:
        return self.manager.value

    def is_available(self) -> bool:
        return self._which(self.manager.value) is not None

    @abstractmethod
    def install_commands(self, package: str) -> list[list[str]]:
        """argv lists to run, in order, to install ``package``."""

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        if not context.params.get("package"):
            return False, "Missing required param: 'package'"
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        return self.ensure_installed(
            context.params["package"],
            action_id=context.action.id,
            probe=context.params.get("command"),
            timeout=context.timeout,
        )

    def ensure_installed(
        self,
        package: str,
        *,
        action_id: str = "",
        probe: str | None = None,
        timeout: int | None = None,
    ) -> Receipt:
        """Install ``package`` unless its command already resolves."""
        action_id = action_id or f"install:{package}"
        command = probe or package

        existing = self._which(command)
        if existing:
            return Receipt.skip(
                adapter=self.name,
                action_id=action_id,
                reason=f"{package} is already installed",
                metadata={"already_present": True, "path": existing},
            )

        logger.info("Installing %s with %s", package, self.name)
        total_ms = 0
        for argv in self.install_commands(package):
            result = self._run(argv, needs_sudo=self.needs_sudo, timeout=timeout)
            total_ms += result.elapsed_ms
            if not result.ok:
                return Receipt.failure(
                    adapter=self.name,
                    action_id=action_id,
                    error=f"{format_argv(result.argv)} failed: {result.error}",
                    duration_ms=total_ms,
                    metadata={"package": package, "return_code": result.returncode},
                )

        return Receipt.success(
            adapter=self.name,
            action_id=action_id,
            output=f"Installed {package}",
            duration_ms=total_ms,
            metadata={"package": package, "path": self._which(command)},
        )


class BrewInstaller(PackageInstaller):
    manager = PackageManager.BREW
    needs_sudo = False  # Homebrew refuses to run as root

    def install_commands(self, package: str) -> list[list[str]]:
        return [["brew", "install", package]]


class AptInstaller(PackageInstaller):
    manager = PackageManager.APT

    def install_commands(self, package: str) -> list[list[str]]:
        return [
            ["apt-get", "update"],
            ["apt-get", "install", "-y", package],
        ]


class YumInstaller(PackageInstaller):
    manager = PackageManager.YUM

    def install_commands(self, package: str) -> list[list[str]]:
        return [["yum", "install", "-y", package]]


INSTALLERS: dict[PackageManager, type[PackageInstaller]] = {
    PackageManager.BREW: BrewInstaller,
    PackageManager.APT: AptInstaller,
    PackageManager.YUM: YumInstaller,
}


def all_installers(runner: Runner = run_subprocess, which: Which = shutil.which) -> list[PackageInstaller]:
    """One instance of every installer variant, ready to register."""
    return [cls(runner=runner, which=which) for cls in INSTALLERS.values()]
