"""
Shared test fixtures.

Nothing here runs a real package manager, git or chsh: adapters get a
FakeRunner that records argv lists and simulates the side effects the
real tools would have (a binary on PATH, a marker directory, a clone).
"""

from __future__ import annotations

import stat
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

import pytest

from dotstrap.adapters import build_registry
from dotstrap.adapters.shell.runner import CommandResult
from dotstrap.core.context import ProvisionContext
from dotstrap.core.host import Host
from dotstrap.core.models.config import ProvisionConfig


@dataclass
class Call:
    argv: list[str]
    needs_sudo: bool = False
    input_text: str | None = None


@dataclass
class _Rule:
    prefix: tuple[str, ...]
    returncode: int = 0
    stdout: str = ""
    stderr: str = ""
    effect: Callable[[list[str]], None] | None = None


class FakeRunner:
    """Runner double. Later rules win over earlier ones."""

    def __init__(self) -> None:
        self.calls: list[Call] = []
        self._rules: list[_Rule] = []

    def on(
        self,
        *prefix: str,
        returncode: int = 0,
        stdout: str = "",
        stderr: str = "",
        effect: Callable[[list[str]], None] | None = None,
    ) -> FakeRunner:
        self._rules.append(_Rule(prefix, returncode, stdout, stderr, effect))
        return self

    def __call__(self, cmd, *, needs_sudo=False, timeout=None, input_text=None, cwd=None):
        argv = list(cmd)
        self.calls.append(Call(argv, needs_sudo, input_text))
        for rule in reversed(self._rules):
            if tuple(argv[: len(rule.prefix)]) == rule.prefix:
                if rule.effect is not None:
                    rule.effect(argv)
                return CommandResult(
                    argv=argv, returncode=rule.returncode, stdout=rule.stdout, stderr=rule.stderr
                )
        return CommandResult(argv=argv, returncode=0)

    def argvs(self, program: str | None = None) -> list[list[str]]:
        return [c.argv for c in self.calls if program is None or c.argv[0] == program]

    def reset(self) -> None:
        self.calls.clear()


def make_tool(bin_dir: Path, name: str) -> Path:
    """Drop an executable stub on the fake PATH."""
    bin_dir.mkdir(parents=True, exist_ok=True)
    tool = bin_dir / name
    tool.write_text("#!/bin/sh\nexit 0\n")
    tool.chmod(tool.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return tool


@dataclass
class Machine:
    """A fake workstation: a home directory, a PATH and a runner."""

    home: Path
    bin_dir: Path
    runner: FakeRunner = field(default_factory=FakeRunner)
    system: str = "Linux"
    user: str = "tester"
    shell: str = "/bin/bash"

    def host(self, **overrides) -> Host:
        values = dict(
            home=self.home,
            user=self.user,
            shell=self.shell,
            system=self.system,
            path=str(self.bin_dir),
        )
        values.update(overrides)
        return Host(**values)

    def tool(self, name: str) -> Path:
        return make_tool(self.bin_dir, name)

    def simulate_real_tools(self) -> None:
        """Make the runner behave like the real installers would."""

        def install(argv: list[str]) -> None:
            self.tool(argv[-1])

        def omz(argv: list[str]) -> None:
            (self.home / ".oh-my-zsh").mkdir()
            (self.home / ".zshrc").write_text("# written by the framework installer\n")

        def clone(argv: list[str]) -> None:
            target = Path(argv[3])
            target.mkdir(parents=True)
            (target / ".zshrc_common").write_text("export EDITOR=vim\n")

        for manager in ("brew", "apt-get", "yum"):
            self.runner.on(manager, "install", effect=install)
        self.runner.on("curl", "-fsSL", stdout="echo installing oh-my-zsh\n")
        self.runner.on("sh", "-c", effect=omz)
        self.runner.on("git", "clone", effect=clone)


@pytest.fixture
def home(tmp_path: Path) -> Path:
    h = tmp_path / "home"
    h.mkdir()
    return h


@pytest.fixture
def bin_dir(tmp_path: Path) -> Path:
    b = tmp_path / "bin"
    b.mkdir()
    return b


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def machine(home: Path, bin_dir: Path, runner: FakeRunner) -> Machine:
    """A Debian-like box with git and curl but no zsh yet."""
    m = Machine(home=home, bin_dir=bin_dir, runner=runner)
    for name in ("apt-get", "git", "curl"):
        m.tool(name)
    m.simulate_real_tools()
    return m


@pytest.fixture
def tool(bin_dir: Path) -> Callable[[str], Path]:
    """Put an executable stub named ``name`` on the fake PATH."""
    return lambda name: make_tool(bin_dir, name)


@pytest.fixture
def make_ctx(machine: Machine):
    """Build a ProvisionContext around the fake machine."""

    def _make(config=None, *, dry_run=False, platform=None, host=None):
        h = host or machine.host()
        return ProvisionContext(
            config=config or ProvisionConfig(),
            host=h,
            registry=build_registry(runner=machine.runner, which=h.which),
            dry_run=dry_run,
            platform=platform,
        )

    return _make
