from __future__ import annotations

import logging

from dotstrap.core.context import ProvisionContext
from dotstrap.core.models.action import Action
from dotstrap.core.models.report import StepResult
from dotstrap.core.steps.base import dry_run_result

logger = logging.getLogger(__name__)


class SyncRepositoryStep:
    """Clone the dotfiles once, trying each transport in turn.

    An existing checkout is left alone (``existing_repo: keep``) or
    fast-forwarded (``existing_repo: pull``); it is never re-cloned.
    """

    step_id = "sync_repository"

    def run(self, ctx: ProvisionContext) -> StepResult:
        repo = ctx.config.repository
        target = ctx.repo_dir

        if target.is_dir():
            if ctx.config.policies.existing_repo == "keep":
                return StepResult.present(self.step_id, f"Dotfiles repository already exists at {target}")
            return self._pull(ctx)

        receipts = []
        for label, url in repo.urls():
            logger.info("Cloning %s via %s transport", url, label)
            receipt = ctx.execute(
                Action(
                    id=f"{self.step_id}:clone-{label}",
                    adapter="git",
                    name=f"clone {url} into {target}",
                    params={"operation": "clone", "url": url, "target": str(target)},
                )
            )
            receipts.append(receipt)

            if receipt.dry_run:
                return dry_run_result(self.step_id, receipts, f"clone {url} into {target}")
            if receipt.ok:
                via = "" if label == "primary" else f" via {label} transport"
                return StepResult.done(self.step_id, f"Cloned {url}{via}", receipts)

            logger.warning("Clone of %s failed: %s", url, receipt.error)

        tried = " and ".join(url for _, url in repo.urls())
        return StepResult.failure(
            self.step_id,
            f"Failed to clone dotfiles repository from {tried}",
            receipts,
        )

    def _pull(self, ctx: ProvisionContext) -> StepResult:
        target = ctx.repo_dir
        receipt = ctx.execute(
            Action(
                id=f"{self.step_id}:pull",
                adapter="git",
                name=f"fast-forward {target}",
                params={"operation": "pull", "target": str(target)},
            )
        )
        if receipt.dry_run:
            return dry_run_result(self.step_id, [receipt], f"fast-forward {target}")
        if receipt.failed:
            return StepResult.warned(
                self.step_id, f"Could not update {target}: {receipt.error}", [receipt]
            )
        return StepResult.done(self.step_id, f"Updated {target}", [receipt])
