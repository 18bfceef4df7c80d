"""
Provisioning context — everything a step needs, passed explicitly.

The context is immutable. Platform detection does not stash its result
in a global: the provisioner derives a new context carrying the frozen
PlatformInfo and hands that to every later step.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path

from dotstrap.adapters.registry import AdapterRegistry
from dotstrap.core.host import Host
from dotstrap.core.models.action import Action, Receipt
from dotstrap.core.models.config import ProvisionConfig
from dotstrap.core.models.platform import PlatformInfo


@dataclass(frozen=True)
class ProvisionContext:
    config: ProvisionConfig
    host: Host
    registry: AdapterRegistry
    dry_run: bool = False
    platform: PlatformInfo | None = None

    def with_platform(self, info: PlatformInfo) -> ProvisionContext:
        return replace(self, platform=info)

    # ── Resolved paths ──────────────────────────────────────────

    @property
    def rc_file(self) -> Path:
        return self.host.expand(self.config.rc_file)

    @property
    def framework_dir(self) -> Path:
        return self.host.expand(self.config.framework.marker_dir)

    @property
    def repo_dir(self) -> Path:
        return self.host.expand(self.config.repository.target)

    @property
    def local_override(self) -> Path:
        return self.host.expand(self.config.local_override.path)

    def link_paths(self) -> list[tuple[Path, Path]]:
        """(source, dest) pairs, sources resolved inside the repository."""
        return [
            (self.host.expand(link.source, base=self.repo_dir), self.host.expand(link.dest))
            for link in self.config.links
        ]

    # ── Dispatch ────────────────────────────────────────────────

    def execute(self, action: Action) -> Receipt:
        """Send an action through the registry with this run's settings."""
        return self.registry.execute_action(
            action,
            home=str(self.host.home),
            dry_run=self.dry_run,
            timeout=self.config.command_timeout,
        )
