"""
Git adapter — clone and fast-forward the dotfiles repository.

Uses the git CLI through the shared runner.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Callable

from dotstrap.adapters.base import Adapter, ExecutionContext
from dotstrap.adapters.shell.runner import Runner, format_argv, run_subprocess
from dotstrap.core.models.action import Receipt

Which = Callable[[str], str | None]

logger = logging.getLogger(__name__)

_VALID_OPS = {"clone", "pull"}


class GitAdapter(Adapter):
    """Git operations.

    Action params:
        operation (str): 'clone' or 'pull'.
        target (str): Local repository directory.
        url (str): Remote URL (for 'clone').
    """

    def __init__(self, runner: Runner = run_subprocess, which: Which = shutil.which):
        self._run = runner
        self._which = which

    @property
    def name(self) -> str:
        return "git"

    def is_available(self) -> bool:
        return self._which("git") is not None

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        operation = context.params.get("operation", "")
        if not operation:
            return False, "Missing required param: 'operation'"
        if operation not in _VALID_OPS:
            return False, f"Unknown operation '{operation}'. Valid: {', '.join(sorted(_VALID_OPS))}"
        if not context.params.get("target"):
            return False, "Missing required param: 'target'"
        if operation == "clone":
            if not context.params.get("url"):
                return False, "Missing required param: 'url' for clone operation"
            target = Path(context.params["target"])
            if target.exists() or target.is_symlink():
                return False, f"Clone target already exists: {context.params['target']}"
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        if context.params["operation"] == "clone":
            return self._clone(context)
        return self._pull(context)

    # ── Operations ──────────────────────────────────────────────

    def _clone(self, ctx: ExecutionContext) -> Receipt:
        url = ctx.params["url"]
        target = Path(ctx.params["target"])
        argv = ["git", "clone", url, str(target)]
        # Only a target this call created may be removed afterwards.
        preexisting = target.exists() or target.is_symlink()

        try:
            result = self._run(argv, timeout=ctx.timeout)
        except BaseException:
            # Ctrl-C mid-clone must not leave a half-written checkout behind.
            if not preexisting:
                self._remove_partial(target)
            raise
        if result.ok:
            return Receipt.success(
                adapter=self.name,
                action_id=ctx.action.id,
                output=f"Cloned {url} into {target}",
                duration_ms=result.elapsed_ms,
                metadata={"url": url, "target": str(target)},
            )

        # A failed clone must not leave a half-populated target behind,
        # or the next run would take it for a finished one.
        removed = False if preexisting else self._remove_partial(target)

        return Receipt.failure(
            adapter=self.name,
            action_id=ctx.action.id,
            error=result.error,
            duration_ms=result.elapsed_ms,
            metadata={
                "url": url,
                "target": str(target),
                "command": format_argv(argv),
                "return_code": result.returncode,
                "partial_removed": removed,
            },
        )

    @staticmethod
    def _remove_partial(target: Path) -> bool:
        """Delete a half-written clone. True if something was removed."""
        if not target.exists():
            return False
        shutil.rmtree(target, ignore_errors=True)
        logger.warning("Removed partial clone at %s", target)
        return not target.exists()

    def _pull(self, ctx: ExecutionContext) -> Receipt:
        target = ctx.params["target"]
        result = self._run(["git", "-C", target, "pull", "--ff-only"], timeout=ctx.timeout)
        if result.ok:
            return Receipt.success(
                adapter=self.name,
                action_id=ctx.action.id,
                output=result.stdout.strip(),
                duration_ms=result.elapsed_ms,
                metadata={"target": target},
            )
        return Receipt.failure(
            adapter=self.name,
            action_id=ctx.action.id,
            error=result.error,
            duration_ms=result.elapsed_ms,
            metadata={"target": target, "return_code": result.returncode},
        )
