"""
Subprocess runner — the single place where ``subprocess.run`` is called.

Every adapter takes a runner with this signature, so tests can swap in
a fake that records calls instead of executing them.
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
import time
from dataclasses import dataclass
from typing import Protocol, Sequence

logger = logging.getLogger(__name__)

# Exit code reported when the executable itself cannot be found.
EXIT_NOT_FOUND = 127
EXIT_TIMEOUT = 124

_TAIL = 2000


@dataclass(frozen=True)
class CommandResult:
    argv: list[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""
    elapsed_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def error(self) -> str:
        """Best one-line description of a failure."""
        detail = self.stderr.strip() or self.stdout.strip()
        if detail:
            return detail.splitlines()[-1]
        return f"Command failed (exit {self.returncode}): {format_argv(self.argv)}"


class Runner(Protocol):
    def __call__(
        self,
        cmd: Sequence[str],
        *,
        needs_sudo: bool = False,
        timeout: int | None = None,
        input_text: str | None = None,
        cwd: str | None = None,
    ) -> CommandResult: ...


def format_argv(argv: Sequence[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)


def _is_root() -> bool:
    geteuid = getattr(os, "geteuid", None)
    return geteuid is not None and geteuid() == 0


def run_subprocess(
    cmd: Sequence[str],
    *,
    needs_sudo: bool = False,
    timeout: int | None = None,
    input_text: str | None = None,
    cwd: str | None = None,
) -> CommandResult:
    """Run a command, never raising for the usual failure modes.

    Args:
        cmd: argv list. Never passed through a shell.
        needs_sudo: Prefix with ``sudo`` unless already root. sudo prompts
            on the terminal as it would from a shell script.
        timeout: Seconds before the child is killed.
        input_text: Text piped to stdin.
        cwd: Working directory.

    Returns:
        CommandResult. A missing executable is exit 127, a timeout 124.
    """
    argv = list(cmd)
    if needs_sudo and not _is_root():
        argv = ["sudo", *argv]

    logger.debug("CMD %s", format_argv(argv))
    start = time.monotonic()
    try:
        result = subprocess.run(
            argv,
            capture_output=True,
            text=True,
            timeout=timeout,
            input=input_text,
            cwd=cwd,
        )
    except FileNotFoundError:
        return CommandResult(
            argv=argv,
            returncode=EXIT_NOT_FOUND,
            stderr=f"{argv[0]}: command not found",
        )
    except subprocess.TimeoutExpired:
        return CommandResult(
            argv=argv,
            returncode=EXIT_TIMEOUT,
            stderr=f"Command timed out after {timeout}s",
            elapsed_ms=int((time.monotonic() - start) * 1000),
        )

    elapsed_ms = int((time.monotonic() - start) * 1000)
    if result.stdout:
        logger.debug("STDOUT %s", result.stdout.strip()[-_TAIL:])
    if result.stderr:
        logger.debug("STDERR %s", result.stderr.strip()[-_TAIL:])

    return CommandResult(
        argv=argv,
        returncode=result.returncode,
        stdout=result.stdout or "",
        stderr=(result.stderr or "")[-_TAIL:],
        elapsed_ms=elapsed_ms,
    )
