"""
Step results and the provisioning report.

A StepResult summarises one step from the receipts of the actions it
dispatched. The ProvisionReport is the ordered list of those results;
the run stops at the first failed step, so at most one result is failed
and it is always the last one.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

from dotstrap.core.models.action import Receipt
from dotstrap.core.models.platform import PlatformInfo

StepStatus = Literal["ok", "skipped", "warned", "failed"]


class StepResult(BaseModel):
    """Outcome of a single provisioning step."""

    step: str
    status: StepStatus = "ok"
    message: str = ""
    changed: bool = False          # True only if the machine was mutated
    receipts: list[Receipt] = Field(default_factory=list)
    platform: PlatformInfo | None = None   # set by platform detection only

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    @classmethod
    def done(cls, step: str, message: str, receipts: list[Receipt] | None = None) -> StepResult:
        """Step mutated the machine (or would have, in dry-run)."""
        receipts = receipts or []
        changed = any(r.ok for r in receipts)
        return cls(step=step, status="ok", message=message, changed=changed, receipts=receipts)

    @classmethod
    def checked(cls, step: str, message: str) -> StepResult:
        """Read-only step passed."""
        return cls(step=step, status="ok", message=message)

    @classmethod
    def present(cls, step: str, message: str, receipts: list[Receipt] | None = None) -> StepResult:
        """Nothing to do, the desired state already holds."""
        return cls(step=step, status="skipped", message=message, receipts=receipts or [])

    @classmethod
    def warned(cls, step: str, message: str, receipts: list[Receipt] | None = None) -> StepResult:
        receipts = receipts or []
        changed = any(r.ok for r in receipts)
        return cls(step=step, status="warned", message=message, changed=changed, receipts=receipts)

    @classmethod
    def failure(cls, step: str, message: str, receipts: list[Receipt] | None = None) -> StepResult:
        receipts = receipts or []
        changed = any(r.ok for r in receipts)
        return cls(step=step, status="failed", message=message, changed=changed, receipts=receipts)


class ProvisionReport(BaseModel):
    """Everything a provisioning run did, in order."""

    dry_run: bool = False
    platform: PlatformInfo | None = None
    steps: list[StepResult] = Field(default_factory=list)

    @property
    def failed_step(self) -> StepResult | None:
        for result in self.steps:
            if result.failed:
                return result
        return None

    @property
    def ok(self) -> bool:
        return self.failed_step is None

    @property
    def changed(self) -> int:
        return sum(1 for r in self.steps if r.changed)

    @property
    def warnings(self) -> list[StepResult]:
        return [r for r in self.steps if r.status == "warned"]

    @property
    def status(self) -> str:
        if not self.ok:
            return "failed"
        if self.warnings:
            return "warned"
        return "ok"

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1

    def to_dict(self) -> dict[str, Any]:
        failed = self.failed_step
        return {
            "status": self.status,
            "dry_run": self.dry_run,
            "platform": self.platform.model_dump(mode="json") if self.platform else None,
            "changed": self.changed,
            "failed_step": failed.step if failed else None,
            "steps": [r.model_dump(mode="json") for r in self.steps],
        }
