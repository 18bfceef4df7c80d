"""
Adapter registry — every Action a step emits is dispatched here.

Lookup is by ``Action.adapter``. Dry-run is decided here and nowhere
else, after validation, so a dry run still reports malformed actions.
"""

from __future__ import annotations

import logging
import time
from typing import Any

from dotstrap.adapters.base import Adapter, ExecutionContext
from dotstrap.core.models.action import Action, Receipt

logger = logging.getLogger(__name__)


class AdapterRegistry:
    """Adapters by name, plus the dispatch loop."""

    def __init__(self) -> None:
        self._adapters: dict[str, Adapter] = {}

    def register(self, adapter: Adapter) -> None:
        """Add ``adapter`` under its name; a later one replaces an earlier one."""
        if adapter.name in self._adapters:
            logger.warning("Replacing adapter %r with %r", self._adapters[adapter.name], adapter)
        self._adapters[adapter.name] = adapter

    def unregister(self, name: str) -> None:
        self._adapters.pop(name, None)

    def get(self, name: str) -> Adapter | None:
        return self._adapters.get(name)

    def list_adapters(self) -> list[str]:
        return sorted(self._adapters)

    def adapter_status(self) -> dict[str, dict[str, Any]]:
        """For each adapter: is its tool on this machine?"""
        return {
            name: {"name": name, "available": _probe(adapter), "type": type(adapter).__name__}
            for name, adapter in self._adapters.items()
        }

    def execute_action(
        self,
        action: Action,
        home: str = ".",
        dry_run: bool = False,
        timeout: int = 900,
    ) -> Receipt:
        """Run one action and return its receipt. Never raises.

        resolve → validate → (dry-run: skip receipt) → execute
        """
        start = time.monotonic()
        adapter = self._adapters.get(action.adapter)
        if adapter is None:
            return _refuse(action, f"No adapter registered for '{action.adapter}'")

        context = ExecutionContext(action=action, home=home, dry_run=dry_run, timeout=timeout)
        try:
            is_valid, error_msg = adapter.validate(context)
        except Exception as e:
            return _refuse(action, f"Validation error: {e}")
        if not is_valid:
            return _refuse(action, f"Validation failed: {error_msg}")

        if dry_run:
            logger.info("[dry-run] %s:%s %s", action.adapter, action.id, action.name)
            return Receipt.skip(
                adapter=action.adapter,
                action_id=action.id,
                reason=f"[dry-run] Would {action.name or action.id}",
                metadata={"dry_run": True},
            )

        try:
            receipt = adapter.execute(context)
        except Exception as e:
            logger.error("Adapter %s raised during execution: %s", action.adapter, e)
            receipt = _refuse(action, f"Unexpected error: {e}")

        receipt.duration_ms = int((time.monotonic() - start) * 1000)
        log = logger.warning if receipt.failed else logger.debug
        log("%s %s:%s → %s", "✗" if receipt.failed else "✓", action.adapter, action.id, receipt.status)
        return receipt


def _probe(adapter: Adapter) -> bool:
    try:
        return bool(adapter.is_available())
    except Exception:
        return False


def _refuse(action: Action, error: str) -> Receipt:
    return Receipt.failure(adapter=action.adapter, action_id=action.id, error=error)
