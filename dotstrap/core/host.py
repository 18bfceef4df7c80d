"""
Host — the process environment, captured once.

Steps never read ``os.environ`` or call ``platform.system()`` directly;
they get a Host. The CLI builds it with ``Host.from_environment()``,
tests construct it by hand around ``tmp_path``.
"""

from __future__ import annotations

import logging
import os
import platform
import shutil
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

try:
    import pwd
except ImportError:  # pragma: no cover - Windows
    pwd = None  # type: ignore[assignment]


def _passwd_shell(user: str) -> str | None:
    """Login shell recorded in the password database (what chsh edits)."""
    if pwd is None or not user:
        return None
    try:
        return pwd.getpwnam(user).pw_shell or None
    except KeyError:
        return None


@dataclass(frozen=True)
class Host:
    home: Path
    user: str = ""
    shell: str = ""                    # $SHELL of this session
    login_shell: str | None = None     # passwd entry; falls back to ``shell``
    system: str = ""                   # `uname -s`
    path: str | None = None            # PATH used for command lookups

    @classmethod
    def from_environment(cls) -> Host:
        user = os.environ.get("USER") or os.environ.get("LOGNAME") or ""
        host = cls(
            home=Path(os.environ.get("HOME") or Path.home()),
            user=user,
            shell=os.environ.get("SHELL", ""),
            login_shell=_passwd_shell(user),
            system=platform.system(),
            path=os.environ.get("PATH"),
        )
        logger.debug(
            "Host: system=%s user=%s home=%s shell=%s login_shell=%s",
            host.system, host.user, host.home, host.shell, host.login_shell,
        )
        return host

    @property
    def current_shell(self) -> str:
        return self.login_shell or self.shell

    def which(self, name: str) -> str | None:
        """Resolve a command on this host's PATH."""
        return shutil.which(name, path=self.path)

    def expand(self, raw: str, base: Path | None = None) -> Path:
        """Resolve a configured path.

        ``~`` and ``~/x`` are relative to this host's home (not the real
        one). Other relative paths are relative to ``base``, or home.
        """
        if raw == "~":
            return self.home
        if raw.startswith("~/"):
            return self.home / raw[2:]
        p = Path(raw)
        if p.is_absolute():
            return p
        return (base or self.home) / p
