"""
Provisioner — the step loop.

Flow:
    preflight → detect platform → verify tools → install shell →
    install framework → sync repository → link files →
    local override → default shell

Each step checks before it acts, so the whole sequence can be re-run
at any time. The loop stops at the first failed step; the report
names that step. Nothing is retried here: the only fallback (SSH →
HTTPS clone) lives inside the repository step.
"""

from __future__ import annotations

import logging
from typing import Callable, Sequence

from dotstrap.adapters import build_registry
from dotstrap.adapters.registry import AdapterRegistry
from dotstrap.adapters.shell.runner import Runner, run_subprocess
from dotstrap.core.context import ProvisionContext
from dotstrap.core.host import Host
from dotstrap.core.models.config import ProvisionConfig
from dotstrap.core.models.report import ProvisionReport, StepResult
from dotstrap.core.steps import (
    DefaultShellStep,
    DetectPlatformStep,
    InstallFrameworkStep,
    InstallShellStep,
    LinkFilesStep,
    LocalOverrideStep,
    PreflightGuardStep,
    SyncRepositoryStep,
    VerifyToolsStep,
)
from dotstrap.core.steps.base import Step

logger = logging.getLogger(__name__)

StepCallback = Callable[[StepResult], None]


def build_steps() -> list[Step]:
    return [
        PreflightGuardStep(),
        DetectPlatformStep(),
        VerifyToolsStep(),
        InstallShellStep(),
        InstallFrameworkStep(),
        SyncRepositoryStep(),
        LinkFilesStep(),
        LocalOverrideStep(),
        DefaultShellStep(),
    ]


class Provisioner:
    """Runs the provisioning steps against one host.

    Args:
        config: Validated configuration.
        host: The environment to provision.
        runner: Subprocess runner shared by every adapter.
        registry: Pre-built registry; built from ``runner`` if omitted.
        dry_run: Check everything, mutate nothing.
        steps: Override the step list.
    """

    def __init__(
        self,
        config: ProvisionConfig,
        host: Host,
        *,
        runner: Runner = run_subprocess,
        registry: AdapterRegistry | None = None,
        dry_run: bool = False,
        steps: Sequence[Step] | None = None,
    ):
        self.config = config
        self.host = host
        self.dry_run = dry_run
        self.registry = registry or build_registry(runner=runner, which=host.which)
        self.steps = list(steps) if steps is not None else build_steps()

    def run(self, on_step: StepCallback | None = None) -> ProvisionReport:
        """Run every step in order, halting at the first failure."""
        ctx = ProvisionContext(
            config=self.config,
            host=self.host,
            registry=self.registry,
            dry_run=self.dry_run,
        )
        report = ProvisionReport(dry_run=self.dry_run)

        for step in self.steps:
            logger.info("Running step %s", step.step_id)
            result = self._run_step(step, ctx)

            if result.platform is not None:
                ctx = ctx.with_platform(result.platform)
                report.platform = result.platform

            report.steps.append(result)
            if on_step is not None:
                on_step(result)

            if result.failed:
                logger.error("Step %s failed: %s", step.step_id, result.message)
                break
            if result.status == "warned":
                logger.warning("Step %s: %s", step.step_id, result.message)
            else:
                logger.info("Step %s → %s: %s", step.step_id, result.status, result.message)

        return report

    @staticmethod
    def _run_step(step: Step, ctx: ProvisionContext) -> StepResult:
        """Run one step; an exception becomes that step's failure."""
        try:
            return step.run(ctx)
        except Exception as e:
            logger.exception("Step %s raised", step.step_id)
            return StepResult.failure(step.step_id, f"Unexpected error: {e}")


def provision(
    config: ProvisionConfig,
    host: Host | None = None,
    *,
    dry_run: bool = False,
    runner: Runner = run_subprocess,
    on_step: StepCallback | None = None,
) -> ProvisionReport:
    """Convenience wrapper: provision ``host`` (default: this machine)."""
    provisioner = Provisioner(
        config,
        host or Host.from_environment(),
        runner=runner,
        dry_run=dry_run,
    )
    return provisioner.run(on_step=on_step)
