"""
Filesystem adapter — the two mutations dotstrap makes in $HOME.

    symlink   force-create dest → source (``ln -sf``)
    seed      create a file with content, only if it does not exist
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from dotstrap.adapters.base import Adapter, ExecutionContext
from dotstrap.core.models.action import Receipt

logger = logging.getLogger(__name__)

_VALID_OPS = {"symlink", "seed"}


class FilesystemAdapter(Adapter):
    """File operations with receipts.

    Action params:
        operation (str): 'symlink' or 'seed'.
        path (str): Target path (the link itself, or the seeded file).
        source (str): Link target (for 'symlink').
        content (str): Initial content (for 'seed').
    """

    @property
    def name(self) -> str:
        return "filesystem"

    def is_available(self) -> bool:
        return True

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        operation = context.params.get("operation", "")
        if not operation:
            return False, "Missing required param: 'operation'"
        if operation not in _VALID_OPS:
            return False, f"Unknown operation '{operation}'. Valid: {', '.join(sorted(_VALID_OPS))}"
        if not context.params.get("path"):
            return False, "Missing required param: 'path'"
        if operation == "symlink" and not context.params.get("source"):
            return False, "Missing required param: 'source' for symlink operation"
        if operation == "seed" and "content" not in context.params:
            return False, "Missing required param: 'content' for seed operation"
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        operation = context.params["operation"]
        target = Path(context.params["path"])
        if not target.is_absolute():
            target = Path(context.home) / target

        try:
            if operation == "symlink":
                return self._symlink(context, target, Path(context.params["source"]))
            return self._seed(context, target, context.params["content"])
        except OSError as e:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=f"Filesystem error: {e}",
                metadata={"operation": operation, "path": str(target)},
            )

    def _symlink(self, ctx: ExecutionContext, target: Path, source: Path) -> Receipt:
        target.parent.mkdir(parents=True, exist_ok=True)
        if target.is_symlink() or target.is_file():
            target.unlink()
        elif target.is_dir():
            # ln -sf would drop the link inside the directory; refuse instead.
            return Receipt.failure(
                adapter=self.name,
                action_id=ctx.action.id,
                error=f"Refusing to replace directory with a symlink: {target}",
                metadata={"path": str(target)},
            )
        os.symlink(source, target)
        logger.info("Linked %s → %s", target, source)
        return Receipt.success(
            adapter=self.name,
            action_id=ctx.action.id,
            output=f"{target} → {source}",
            metadata={"path": str(target), "source": str(source)},
        )

    def _seed(self, ctx: ExecutionContext, target: Path, content: str) -> Receipt:
        if target.exists():
            return Receipt.skip(
                adapter=self.name,
                action_id=ctx.action.id,
                reason=f"{target} already exists",
                metadata={"path": str(target), "already_present": True},
            )
        target.parent.mkdir(parents=True, exist_ok=True)
        # "x" mode: never truncate a file that appeared since the check.
        with target.open("x", encoding="utf-8") as f:
            f.write(content if content.endswith("\n") else content + "\n")
        return Receipt.success(
            adapter=self.name,
            action_id=ctx.action.id,
            output=f"Created {target}",
            metadata={"path": str(target)},
        )
