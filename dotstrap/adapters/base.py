"""
Adapter base — the contract between provisioning steps and the outside world.

Steps never shell out or touch the filesystem for a mutation directly;
they build an Action and the registry hands it to an Adapter. Read-only
existence checks stay in the steps.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel

from dotstrap.core.models.action import Action, Receipt


class ExecutionContext(BaseModel):
    """An adapter's view of one action: what to do, and under which limits."""

    action: Action
    home: str = "."
    dry_run: bool = False
    timeout: int = 900

    @property
    def params(self) -> dict[str, Any]:
        return self.action.params


class Adapter(ABC):
    """One kind of side effect (a package manager, git, the filesystem).

    Failures come back as failed receipts, not exceptions; the registry
    catches anything that slips through.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The adapter identifier (e.g. 'shell', 'git', 'apt-get')."""

    @abstractmethod
    def is_available(self) -> bool:
        """Whether the underlying tool exists. Fast, never raises."""

    @abstractmethod
    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        """(True, "") if the params are usable, else (False, reason)."""

    @abstractmethod
    def execute(self, context: ExecutionContext) -> Receipt:
        """Perform the action. Not called in dry-run."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
