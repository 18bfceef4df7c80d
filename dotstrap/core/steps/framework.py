from __future__ import annotations

import logging

from dotstrap.core.context import ProvisionContext
from dotstrap.core.models.action import Action
from dotstrap.core.models.report import StepResult
from dotstrap.core.steps.base import dry_run_result, policy_result

logger = logging.getLogger(__name__)


class InstallFrameworkStep:
    """Fetch the framework's installer with curl and run it unattended.

    Equivalent to ``sh -c "$(curl -fsSL URL)" "" --unattended``, split in
    two actions so a fetch failure and an installer failure are told apart.
    """

    step_id = "install_framework"

    def run(self, ctx: ProvisionContext) -> StepResult:
        spec = ctx.config.framework
        policy = ctx.config.policies.framework_failure

        if ctx.framework_dir.is_dir():
            return StepResult.present(self.step_id, f"{spec.name} is already installed")

        fetch = ctx.execute(
            Action(
                id=f"{self.step_id}:fetch",
                adapter="shell",
                name=f"download the {spec.name} installer",
                params={"command": ["curl", "-fsSL", spec.installer_url]},
            )
        )
        if fetch.dry_run:
            return dry_run_result(self.step_id, [fetch], f"install {spec.name} from {spec.installer_url}")
        if fetch.failed:
            return policy_result(
                self.step_id,
                policy,
                f"Downloading the {spec.name} installer failed: {fetch.error}",
                [fetch],
            )

        # The script goes to sh, not into the report.
        script = fetch.output
        fetch = fetch.model_copy(
            update={"output": f"Downloaded {spec.installer_url} ({len(script.encode())} bytes)"}
        )

        # $0 is "" so the installer sees its options from $1 on.
        install = ctx.execute(
            Action(
                id=f"{self.step_id}:run",
                adapter="shell",
                name=f"run the {spec.name} installer",
                params={"command": ["sh", "-c", script, "", *spec.installer_args]},
            )
        )
        receipts = [fetch, install]
        if install.failed:
            return policy_result(self.step_id, policy, f"{spec.name} install failed: {install.error}", receipts)

        if not ctx.framework_dir.is_dir():
            logger.warning("%s installer exited 0 but %s is missing", spec.name, ctx.framework_dir)
        return StepResult.done(self.step_id, f"Installed {spec.name}", receipts)
