from __future__ import annotations

from dotstrap.core.context import ProvisionContext
from dotstrap.core.models.report import StepResult
from dotstrap.core.services.platform_detect import detect_platform


class DetectPlatformStep:
    step_id = "detect_platform"

    def run(self, ctx: ProvisionContext) -> StepResult:
        info = detect_platform(ctx.host)
        if not info.supported:
            return StepResult(step=self.step_id, status="failed", message=info.detail, platform=info)

        assert info.package_manager is not None
        return StepResult(
            step=self.step_id,
            status="ok",
            message=f"Detected {info.os_kind.value} ({info.package_manager.value})",
            platform=info,
        )
