from __future__ import annotations

import logging
import os
from pathlib import Path

from dotstrap.core.context import ProvisionContext
from dotstrap.core.models.action import Action
from dotstrap.core.models.report import StepResult
from dotstrap.core.steps.base import dry_run_result, policy_result

logger = logging.getLogger(__name__)


def same_shell(current: str, target: str) -> bool:
    """Basename match (``/bin/zsh`` vs ``/usr/bin/zsh``) or same file."""
    if not current:
        return False
    if Path(current).name == Path(target).name:
        return True
    return os.path.realpath(current) == os.path.realpath(target)


class DefaultShellStep:
    step_id = "default_shell"

    def run(self, ctx: ProvisionContext) -> StepResult:
        shell = ctx.config.shell
        policies = ctx.config.policies
        user = ctx.host.user

        target = ctx.host.which(shell)
        if target is None:
            if ctx.dry_run:
                return StepResult(step=self.step_id, message=f"[dry-run] Would make {shell} the default shell")
            return policy_result(
                self.step_id, policies.shell_change_failure, f"{shell} not found on PATH", []
            )

        current = ctx.host.current_shell
        if same_shell(current, target):
            return StepResult.present(self.step_id, f"{shell} is already the default shell")

        if policies.chsh_with_sudo:
            if not user:
                return policy_result(
                    self.step_id,
                    policies.shell_change_failure,
                    f"Cannot change the default shell: user unknown. Please run: sudo chsh -s {target} $USER",
                    [],
                )
            command = ["chsh", "-s", target, user]
            manual = f"sudo chsh -s {target} {user}"
        else:
            command = ["chsh", "-s", target]
            manual = f"chsh -s {target}"

        logger.info("Changing default shell from %s to %s", current or "unknown", target)
        receipt = ctx.execute(
            Action(
                id=f"{self.step_id}:chsh",
                adapter="shell",
                name=f"change the default shell to {target}",
                params={"command": command, "needs_sudo": policies.chsh_with_sudo},
            )
        )
        if receipt.dry_run:
            return dry_run_result(self.step_id, [receipt], f"change the default shell to {target}")
        if receipt.failed:
            return policy_result(
                self.step_id,
                policies.shell_change_failure,
                f"Unable to change shell automatically. Please run: {manual}",
                [receipt],
            )
        return StepResult.done(self.step_id, f"Default shell changed to {target}", [receipt])
