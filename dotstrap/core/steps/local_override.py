from __future__ import annotations

from dotstrap.core.context import ProvisionContext
from dotstrap.core.models.action import Action
from dotstrap.core.models.report import StepResult
from dotstrap.core.steps.base import dry_run_result


class LocalOverrideStep:
    """Seed the machine-local override file. Never touches an existing one."""

    step_id = "local_override"

    def run(self, ctx: ProvisionContext) -> StepResult:
        path = ctx.local_override
        if path.exists() or path.is_symlink():
            return StepResult.present(self.step_id, f"{path} already exists")

        receipt = ctx.execute(
            Action(
                id=f"{self.step_id}:seed",
                adapter="filesystem",
                name=f"create {path}",
                params={"operation": "seed", "path": str(path), "content": ctx.config.local_override.seed},
            )
        )
        if receipt.dry_run:
            return dry_run_result(self.step_id, [receipt], f"create {path}")
        if receipt.failed:
            return StepResult.failure(self.step_id, f"Creating {path} failed: {receipt.error}", [receipt])
        if receipt.skipped:
            return StepResult.present(self.step_id, f"{path} already exists", [receipt])
        return StepResult.done(self.step_id, f"Created machine-specific {path}", [receipt])
