"""
Inspection — what would a provisioning run still have to do?

Runs the same existence checks as the steps, and nothing else: no
adapters, no subprocesses.
"""

from __future__ import annotations

from dotstrap.core.host import Host
from dotstrap.core.models.config import ProvisionConfig
from dotstrap.core.models.state import InstallationState, LinkState
from dotstrap.core.services.platform_detect import detect_platform
from dotstrap.core.steps.default_shell import same_shell
from dotstrap.core.steps.links import is_linked


def observe_state(config: ProvisionConfig, host: Host) -> InstallationState:
    repo_dir = host.expand(config.repository.target)
    shell_path = host.which(config.shell)
    current = host.current_shell

    links = []
    for link in config.links:
        source = host.expand(link.source, base=repo_dir)
        dest = host.expand(link.dest)
        links.append(
            LinkState(
                dest=str(dest),
                source=str(source),
                exists=dest.exists() or dest.is_symlink(),
                correct=is_linked(dest, source),
            )
        )

    local = host.expand(config.local_override.path)
    return InstallationState(
        platform=detect_platform(host),
        missing_tools=[t for t in config.required_tools if host.which(t) is None],
        shell_path=shell_path,
        framework_installed=host.expand(config.framework.marker_dir).is_dir(),
        repository_present=repo_dir.is_dir(),
        links=links,
        local_override_present=local.exists() or local.is_symlink(),
        login_shell=current,
        default_shell_matches=bool(shell_path) and same_shell(current, shell_path),
    )
