"""
Step protocol and the receipt → result helpers every step shares.
"""

from __future__ import annotations

from typing import Protocol

from dotstrap.core.context import ProvisionContext
from dotstrap.core.models.action import Receipt
from dotstrap.core.models.report import StepResult


class Step(Protocol):
    """A single idempotent provisioning step."""

    step_id: str

    def run(self, ctx: ProvisionContext) -> StepResult:
        ...


def dry_run_result(step: str, receipts: list[Receipt], what: str) -> StepResult:
    return StepResult(
        step=step,
        status="ok",
        message=f"[dry-run] Would {what}",
        receipts=receipts,
    )


def policy_result(
    step: str,
    policy: str,
    message: str,
    receipts: list[Receipt],
) -> StepResult:
    """Fail or warn, as the configured policy says."""
    if policy == "warn":
        return StepResult.warned(step, message, receipts)
    return StepResult.failure(step, message, receipts)
