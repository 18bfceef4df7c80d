"""
Tests for the adapter contract, registry, shell and filesystem adapters.
"""

import os
from pathlib import Path

from dotstrap.adapters import build_registry
from dotstrap.adapters.base import Adapter, ExecutionContext
from dotstrap.adapters.registry import AdapterRegistry
from dotstrap.adapters.shell.command import ShellCommandAdapter
from dotstrap.adapters.shell.filesystem import FilesystemAdapter
from dotstrap.core.models.action import Action, Receipt


def _ctx(adapter: str, action_id: str = "op", home: str = ".", **params) -> ExecutionContext:
    return ExecutionContext(action=Action(id=action_id, adapter=adapter, params=params), home=home)


class _StubAdapter(Adapter):
    """Records every context it is handed and succeeds."""

    def __init__(self, adapter_name: str = "stub", available: bool = True):
        self._name = adapter_name
        self._available = available
        self.calls: list[ExecutionContext] = []

    @property
    def name(self) -> str:
        return self._name

    def is_available(self) -> bool:
        return self._available

    def validate(self, context):
        return True, ""

    def execute(self, context):
        self.calls.append(context)
        return Receipt.success(adapter=self._name, action_id=context.action.id)


class _ExplodingAdapter(_StubAdapter):
    def execute(self, context):
        raise RuntimeError("boom")


class _StrictAdapter(_StubAdapter):
    def validate(self, context):
        if "needed" not in context.params:
            return False, "Missing required param: 'needed'"
        return True, ""


# ── Protocol Tests ───────────────────────────────────────────────────


class TestExecutionContext:
    def test_params_come_from_action(self):
        ctx = _ctx("shell", command=["true"])
        assert ctx.params == {"command": ["true"]}

    def test_defaults(self):
        ctx = ExecutionContext(action=Action(id="x", adapter="shell"))
        assert ctx.dry_run is False
        assert ctx.timeout == 900


# ── Registry Tests ───────────────────────────────────────────────────


class TestAdapterRegistry:
    def test_register_and_get(self):
        registry = AdapterRegistry()
        stub = _StubAdapter()
        registry.register(stub)
        assert registry.get("stub") is stub
        assert registry.list_adapters() == ["stub"]

    def test_unregister(self):
        registry = AdapterRegistry()
        registry.register(_StubAdapter())
        registry.unregister("stub")
        assert registry.get("stub") is None
        registry.unregister("stub")  # no error on unknown

    def test_adapter_status(self):
        registry = AdapterRegistry()
        registry.register(_StubAdapter(adapter_name="up"))
        registry.register(_StubAdapter(adapter_name="down", available=False))
        status = registry.adapter_status()
        assert status["up"]["available"] is True
        assert status["down"]["available"] is False
        assert status["up"]["type"] == "_StubAdapter"

    def test_unknown_adapter_fails(self):
        registry = AdapterRegistry()
        receipt = registry.execute_action(Action(id="x", adapter="nope"))
        assert receipt.failed
        assert "No adapter registered for 'nope'" in receipt.error

    def test_validation_failure(self):
        registry = AdapterRegistry()
        registry.register(_StrictAdapter())
        receipt = registry.execute_action(Action(id="x", adapter="stub"))
        assert receipt.failed
        assert receipt.error.startswith("Validation failed:")

    def test_dry_run_skips_without_executing(self):
        registry = AdapterRegistry()
        stub = _StubAdapter()
        registry.register(stub)
        receipt = registry.execute_action(
            Action(id="x", adapter="stub", name="do the thing"), dry_run=True
        )
        assert receipt.skipped
        assert receipt.dry_run
        assert receipt.output == "[dry-run] Would do the thing"
        assert stub.calls == []

    def test_dry_run_still_validates(self):
        registry = AdapterRegistry()
        registry.register(_StrictAdapter())
        receipt = registry.execute_action(Action(id="x", adapter="stub"), dry_run=True)
        assert receipt.failed

    def test_adapter_exception_becomes_receipt(self):
        registry = AdapterRegistry()
        registry.register(_ExplodingAdapter())
        receipt = registry.execute_action(Action(id="x", adapter="stub"))
        assert receipt.failed
        assert "Unexpected error: boom" in receipt.error

    def test_passes_settings_to_adapter(self):
        registry = AdapterRegistry()
        stub = _StubAdapter()
        registry.register(stub)
        registry.execute_action(Action(id="x", adapter="stub"), home="/h", timeout=5)
        ctx = stub.calls[0]
        assert ctx.home == "/h"
        assert ctx.timeout == 5

    def test_build_registry_has_every_adapter(self, runner):
        registry = build_registry(runner=runner, which=lambda name: None)
        assert set(registry.list_adapters()) == {
            "shell", "filesystem", "git", "brew", "apt-get", "yum",
        }


# ── Shell Command Adapter Tests ──────────────────────────────────────


class TestShellCommandAdapter:
    def test_validate_requires_command(self, runner):
        adapter = ShellCommandAdapter(runner=runner)
        ok, err = adapter.validate(_ctx("shell"))
        assert not ok
        assert "command" in err

    def test_validate_rejects_string_command(self, runner):
        adapter = ShellCommandAdapter(runner=runner)
        ok, err = adapter.validate(_ctx("shell", command="echo hi"))
        assert not ok
        assert "list of strings" in err

    def test_success_captures_stdout(self, runner):
        runner.on("echo", stdout="hello\n")
        adapter = ShellCommandAdapter(runner=runner)
        receipt = adapter.execute(_ctx("shell", command=["echo", "hello"]))
        assert receipt.ok
        assert receipt.output == "hello\n"
        assert receipt.metadata["return_code"] == 0

    def test_failure_uses_stderr(self, runner):
        runner.on("chsh", returncode=1, stderr="chsh: PAM: Authentication failure\n")
        adapter = ShellCommandAdapter(runner=runner)
        receipt = adapter.execute(_ctx("shell", command=["chsh", "-s", "/bin/zsh"]))
        assert receipt.failed
        assert receipt.error == "chsh: PAM: Authentication failure"
        assert receipt.metadata["return_code"] == 1

    def test_forwards_sudo_and_input(self, runner):
        adapter = ShellCommandAdapter(runner=runner)
        adapter.execute(_ctx("shell", command=["cat"], needs_sudo=True, input="data"))
        call = runner.calls[0]
        assert call.needs_sudo is True
        assert call.input_text == "data"

    def test_long_command_shortened_in_metadata(self, runner):
        script = "echo x\n" * 1000
        adapter = ShellCommandAdapter(runner=runner)
        receipt = adapter.execute(_ctx("shell", command=["sh", "-c", script]))
        assert receipt.metadata["command"].startswith("sh -c ")
        assert receipt.metadata["command"].endswith("chars)")
        assert len(receipt.metadata["command"]) < 300
        assert runner.calls[0].argv[2] == script

    def test_short_command_kept_whole(self, runner):
        adapter = ShellCommandAdapter(runner=runner)
        receipt = adapter.execute(_ctx("shell", command=["chsh", "-s", "/bin/zsh"]))
        assert receipt.metadata["command"] == "chsh -s /bin/zsh"


# ── Filesystem Adapter Tests ─────────────────────────────────────────


class TestFilesystemAdapter:
    def test_validate_unknown_operation(self):
        ok, err = FilesystemAdapter().validate(_ctx("filesystem", operation="delete", path="x"))
        assert not ok
        assert "Unknown operation" in err

    def test_validate_symlink_needs_source(self):
        ok, err = FilesystemAdapter().validate(_ctx("filesystem", operation="symlink", path="x"))
        assert not ok
        assert "source" in err

    def test_validate_seed_needs_content(self):
        ok, err = FilesystemAdapter().validate(_ctx("filesystem", operation="seed", path="x"))
        assert not ok
        assert "content" in err

    def test_symlink_creates_link(self, tmp_path: Path):
        source = tmp_path / "repo" / ".zshrc_common"
        source.parent.mkdir()
        source.write_text("x")
        dest = tmp_path / ".zshrc_common"
        receipt = FilesystemAdapter().execute(
            _ctx("filesystem", operation="symlink", path=str(dest), source=str(source))
        )
        assert receipt.ok
        assert dest.is_symlink()
        assert Path(os.readlink(dest)) == source

    def test_symlink_replaces_file_and_link(self, tmp_path: Path):
        source = tmp_path / "new"
        dest = tmp_path / "dest"
        dest.write_text("old content")
        adapter = FilesystemAdapter()
        adapter.execute(_ctx("filesystem", operation="symlink", path=str(dest), source=str(source)))
        assert Path(os.readlink(dest)) == source

        other = tmp_path / "other"
        adapter.execute(_ctx("filesystem", operation="symlink", path=str(dest), source=str(other)))
        assert Path(os.readlink(dest)) == other

    def test_symlink_refuses_directory(self, tmp_path: Path):
        dest = tmp_path / "dir"
        dest.mkdir()
        receipt = FilesystemAdapter().execute(
            _ctx("filesystem", operation="symlink", path=str(dest), source=str(tmp_path / "s"))
        )
        assert receipt.failed
        assert "Refusing" in receipt.error
        assert dest.is_dir() and not dest.is_symlink()

    def test_relative_path_resolves_against_home(self, tmp_path: Path):
        receipt = FilesystemAdapter().execute(
            _ctx("filesystem", home=str(tmp_path), operation="seed", path="local", content="# hi")
        )
        assert receipt.ok
        assert (tmp_path / "local").read_text() == "# hi\n"

    def test_seed_never_overwrites(self, tmp_path: Path):
        target = tmp_path / ".zshrc_local"
        target.write_text("export MINE=1\n")
        receipt = FilesystemAdapter().execute(
            _ctx("filesystem", operation="seed", path=str(target), content="# seed")
        )
        assert receipt.skipped
        assert receipt.metadata["already_present"] is True
        assert target.read_text() == "export MINE=1\n"

    def test_seed_creates_parent_dirs(self, tmp_path: Path):
        target = tmp_path / "a" / "b" / "f"
        receipt = FilesystemAdapter().execute(
            _ctx("filesystem", operation="seed", path=str(target), content="line\n")
        )
        assert receipt.ok
        assert target.read_text() == "line\n"
