from __future__ import annotations

from dotstrap.core.context import ProvisionContext
from dotstrap.core.models.report import StepResult


class VerifyToolsStep:
    """Required tools must already be on PATH; we do not install them."""

    step_id = "verify_tools"

    def run(self, ctx: ProvisionContext) -> StepResult:
        for tool in ctx.config.required_tools:
            if ctx.host.which(tool) is None:
                return StepResult.failure(self.step_id, f"{tool} is not installed. Aborting.")
        return StepResult.checked(
            self.step_id, f"Found {', '.join(ctx.config.required_tools) or 'no required tools'}"
        )
