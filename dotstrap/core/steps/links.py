from __future__ import annotations

import logging
import os
from pathlib import Path

from dotstrap.core.context import ProvisionContext
from dotstrap.core.models.action import Action, Receipt
from dotstrap.core.models.report import StepResult

logger = logging.getLogger(__name__)


def is_linked(dest: Path, source: Path) -> bool:
    """True if ``dest`` is already a symlink pointing at ``source``."""
    if not dest.is_symlink():
        return False
    return Path(os.readlink(dest)) == source


class LinkFilesStep:
    """Force-link each configured file from the repository into $HOME."""

    step_id = "link_files"

    def run(self, ctx: ProvisionContext) -> StepResult:
        receipts: list[Receipt] = []
        linked: list[str] = []
        notes: list[str] = []

        for source, dest in ctx.link_paths():
            if is_linked(dest, source):
                continue

            if not source.exists() and not ctx.dry_run:
                notes.append(f"{source} does not exist; {dest.name} will dangle")

            receipt = ctx.execute(
                Action(
                    id=f"{self.step_id}:{dest.name}",
                    adapter="filesystem",
                    name=f"link {dest} → {source}",
                    params={"operation": "symlink", "path": str(dest), "source": str(source)},
                )
            )
            receipts.append(receipt)
            if receipt.failed:
                return StepResult.failure(
                    self.step_id, f"Linking {dest} failed: {receipt.error}", receipts
                )
            linked.append(dest.name)

        if not receipts:
            return StepResult.present(self.step_id, "All links already in place")
        if ctx.dry_run:
            return StepResult(
                step=self.step_id,
                message=f"[dry-run] Would link {', '.join(linked)}",
                receipts=receipts,
            )
        if notes:
            return StepResult.warned(self.step_id, "; ".join(notes), receipts)
        return StepResult.done(self.step_id, f"Linked {', '.join(linked)}", receipts)
