"""
Shell command adapter — run one external command.

Used for the framework installer (fetch + execute) and for ``chsh``.
Commands are argv lists; nothing goes through ``sh -c`` unless the
caller asks for it explicitly in the argv.
"""

from __future__ import annotations

import logging
import shutil

from dotstrap.adapters.base import Adapter, ExecutionContext
from dotstrap.adapters.shell.runner import Runner, format_argv, run_subprocess
from dotstrap.core.models.action import Receipt

logger = logging.getLogger(__name__)

# Receipts end up in `provision --json`; an inline script stays out of them.
_MAX_COMMAND_CHARS = 200


class ShellCommandAdapter(Adapter):
    """Execute a command and capture its output.

    Action params:
        command (list[str]): argv to execute.
        needs_sudo (bool): Run through sudo unless root (default: False).
        input (str): Text piped to stdin.
    """

    def __init__(self, runner: Runner = run_subprocess):
        self._run = runner

    @property
    def name(self) -> str:
        return "shell"

    def is_available(self) -> bool:
        return shutil.which("sh") is not None

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        command = context.params.get("command")
        if not command:
            return False, "Missing required param: 'command'"
        if not isinstance(command, list) or not all(isinstance(a, str) for a in command):
            return False, "Param 'command' must be a list of strings"
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        command = context.params["command"]
        result = self._run(
            command,
            needs_sudo=bool(context.params.get("needs_sudo", False)),
            timeout=context.timeout,
            input_text=context.params.get("input"),
        )
        metadata = {"command": _summarize(format_argv(result.argv)), "return_code": result.returncode}

        if result.ok:
            return Receipt.success(
                adapter=self.name,
                action_id=context.action.id,
                output=result.stdout,
                duration_ms=result.elapsed_ms,
                metadata=metadata,
            )
        return Receipt.failure(
            adapter=self.name,
            action_id=context.action.id,
            error=result.error,
            duration_ms=result.elapsed_ms,
            metadata=metadata,
        )


def _summarize(command: str) -> str:
    if len(command) <= _MAX_COMMAND_CHARS:
        return command
    return f"{command[:_MAX_COMMAND_CHARS]}… ({len(command)} chars)"
