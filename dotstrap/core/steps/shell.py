from __future__ import annotations

from dotstrap.core.context import ProvisionContext
from dotstrap.core.models.action import Action
from dotstrap.core.models.report import StepResult
from dotstrap.core.steps.base import dry_run_result


class InstallShellStep:
    step_id = "install_shell"

    def run(self, ctx: ProvisionContext) -> StepResult:
        platform = ctx.platform
        if platform is None or platform.package_manager is None:
            return StepResult.failure(self.step_id, "Platform not detected; no package manager to use")

        package = ctx.config.shell
        existing = ctx.host.which(package)
        if existing:
            return StepResult.present(self.step_id, f"{package} is already installed ({existing})")

        receipt = ctx.execute(
            Action(
                id=f"{self.step_id}:{package}",
                adapter=platform.package_manager.value,
                name=f"install {package} with {platform.package_manager.value}",
                params={"package": package},
            )
        )

        if receipt.dry_run:
            return dry_run_result(self.step_id, [receipt], f"install {package}")
        if receipt.skipped:
            return StepResult.present(self.step_id, f"{package} is already installed", [receipt])
        if receipt.failed:
            return StepResult.failure(self.step_id, f"Installing {package} failed: {receipt.error}", [receipt])
        return StepResult.done(self.step_id, f"Installed {package}", [receipt])
