"""
InstallationState — an observed snapshot, never persisted.

The filesystem and the installed binaries are the real state; this model
only records what ``observe_state()`` saw at one moment, for display.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from dotstrap.core.models.platform import PlatformInfo


class LinkState(BaseModel):
    dest: str
    source: str
    correct: bool = False
    exists: bool = False


class InstallationState(BaseModel):
    platform: PlatformInfo
    missing_tools: list[str] = Field(default_factory=list)
    shell_path: str | None = None
    framework_installed: bool = False
    repository_present: bool = False
    links: list[LinkState] = Field(default_factory=list)
    local_override_present: bool = False
    login_shell: str = ""
    default_shell_matches: bool = False

    @property
    def shell_installed(self) -> bool:
        return self.shell_path is not None

    @property
    def complete(self) -> bool:
        """True when a provisioning run would have nothing left to do."""
        return (
            self.platform.supported
            and not self.missing_tools
            and self.shell_installed
            and self.framework_installed
            and self.repository_present
            and all(link.correct for link in self.links)
            and self.local_override_present
            and self.default_shell_matches
        )

    def checks(self) -> list[tuple[str, bool, str]]:
        """(label, passed, detail) rows for display."""
        rows = [
            (
                "platform",
                self.platform.supported,
                self.platform.os_kind.value
                + (f" ({self.platform.package_manager.value})" if self.platform.package_manager else "")
                + (f": {self.platform.detail}" if self.platform.detail else ""),
            ),
            (
                "tools",
                not self.missing_tools,
                "missing: " + ", ".join(self.missing_tools) if self.missing_tools else "all present",
            ),
            ("shell", self.shell_installed, self.shell_path or "not installed"),
            ("framework", self.framework_installed, "installed" if self.framework_installed else "absent"),
            ("repository", self.repository_present, "present" if self.repository_present else "absent"),
        ]
        for link in self.links:
            detail = f"{link.dest} → {link.source}" if link.correct else (
                f"{link.dest} is not linked to {link.source}" if link.exists else f"{link.dest} missing"
            )
            rows.append(("link", link.correct, detail))
        rows.append(
            ("local override", self.local_override_present,
             "present" if self.local_override_present else "absent")
        )
        rows.append(("default shell", self.default_shell_matches, self.login_shell or "unknown"))
        return rows

    def to_dict(self) -> dict:
        data = self.model_dump(mode="json")
        data["complete"] = self.complete
        return data
