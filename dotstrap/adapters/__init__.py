"""Adapters — bindings to the package managers, git, the shell and $HOME.

Public re-exports for convenient access.
"""

from __future__ import annotations

import shutil
from typing import Callable

from dotstrap.adapters.base import Adapter, ExecutionContext
from dotstrap.adapters.packages.installers import all_installers
from dotstrap.adapters.registry import AdapterRegistry
from dotstrap.adapters.shell.command import ShellCommandAdapter
from dotstrap.adapters.shell.filesystem import FilesystemAdapter
from dotstrap.adapters.shell.runner import CommandResult, Runner, run_subprocess
from dotstrap.adapters.vcs.git import GitAdapter


def build_registry(
    runner: Runner = run_subprocess,
    which: Callable[[str], str | None] = shutil.which,
) -> AdapterRegistry:
    """A registry with every adapter dotstrap uses, sharing one runner."""
    registry = AdapterRegistry()
    registry.register(ShellCommandAdapter(runner=runner))
    registry.register(FilesystemAdapter())
    registry.register(GitAdapter(runner=runner, which=which))
    for installer in all_installers(runner=runner, which=which):
        registry.register(installer)
    return registry


__all__ = [
    "Adapter",
    "AdapterRegistry",
    "CommandResult",
    "ExecutionContext",
    "Runner",
    "build_registry",
    "run_subprocess",
]
