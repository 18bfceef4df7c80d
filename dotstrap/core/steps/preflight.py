from __future__ import annotations

import logging

from dotstrap.core.context import ProvisionContext
from dotstrap.core.models.report import StepResult

logger = logging.getLogger(__name__)


class PreflightGuardStep:
    """Refuse to start over an rc file we did not create.

    The framework installer writes its own rc file, so once the framework
    marker exists the rc file is ours and the guard stands down.
    """

    step_id = "preflight"

    def run(self, ctx: ProvisionContext) -> StepResult:
        if not ctx.config.policies.guard_existing_rc:
            return StepResult.checked(self.step_id, "Pre-flight guard disabled")

        rc = ctx.rc_file
        rc_present = rc.exists() or rc.is_symlink()
        if rc_present and not ctx.framework_dir.is_dir():
            return StepResult.failure(
                self.step_id,
                f"Found existing {rc.name} file. This script will overwrite it. "
                f"Please backup and remove your existing {rc.name} first if you want to proceed.",
            )
        return StepResult.checked(self.step_id, "No unmanaged rc file in the way")
