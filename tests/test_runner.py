"""
Tests for the subprocess runner — the only caller of subprocess.run.
"""

import subprocess
from unittest.mock import MagicMock, patch

from dotstrap.adapters.shell.runner import (
    EXIT_NOT_FOUND,
    EXIT_TIMEOUT,
    CommandResult,
    format_argv,
    run_subprocess,
)


def _completed(returncode=0, stdout="", stderr=""):
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


class TestCommandResult:
    def test_ok(self):
        assert CommandResult(argv=["true"], returncode=0).ok
        assert not CommandResult(argv=["false"], returncode=1).ok

    def test_error_prefers_last_stderr_line(self):
        r = CommandResult(argv=["x"], returncode=1, stderr="warning\nfatal: nope\n")
        assert r.error == "fatal: nope"

    def test_error_falls_back_to_stdout(self):
        r = CommandResult(argv=["x"], returncode=1, stdout="E: Unable to locate package\n")
        assert r.error == "E: Unable to locate package"

    def test_error_without_output(self):
        r = CommandResult(argv=["git", "clone", "a b"], returncode=128)
        assert r.error == "Command failed (exit 128): git clone 'a b'"


class TestFormatArgv:
    def test_quotes_when_needed(self):
        assert format_argv(["sh", "-c", "echo hi", ""]) == "sh -c 'echo hi' ''"


class TestRunSubprocess:
    @patch("dotstrap.adapters.shell.runner._is_root", return_value=False)
    @patch("dotstrap.adapters.shell.runner.subprocess.run")
    def test_sudo_prefix_when_not_root(self, mock_run: MagicMock, _root):
        mock_run.return_value = _completed()
        result = run_subprocess(["apt-get", "update"], needs_sudo=True)
        assert mock_run.call_args[0][0] == ["sudo", "apt-get", "update"]
        assert result.argv == ["sudo", "apt-get", "update"]

    @patch("dotstrap.adapters.shell.runner._is_root", return_value=True)
    @patch("dotstrap.adapters.shell.runner.subprocess.run")
    def test_no_sudo_when_root(self, mock_run: MagicMock, _root):
        mock_run.return_value = _completed()
        run_subprocess(["apt-get", "update"], needs_sudo=True)
        assert mock_run.call_args[0][0] == ["apt-get", "update"]

    @patch("dotstrap.adapters.shell.runner.subprocess.run")
    def test_passes_options(self, mock_run: MagicMock):
        mock_run.return_value = _completed(stdout="out")
        result = run_subprocess(["cat"], timeout=5, input_text="data", cwd="/tmp")
        kwargs = mock_run.call_args[1]
        assert kwargs["timeout"] == 5
        assert kwargs["input"] == "data"
        assert kwargs["cwd"] == "/tmp"
        assert kwargs["capture_output"] is True
        assert kwargs["text"] is True
        assert result.ok
        assert result.stdout == "out"

    @patch("dotstrap.adapters.shell.runner.subprocess.run")
    def test_nonzero_exit(self, mock_run: MagicMock):
        mock_run.return_value = _completed(returncode=2, stderr="bad\n")
        result = run_subprocess(["false"])
        assert result.returncode == 2
        assert result.error == "bad"

    @patch("dotstrap.adapters.shell.runner.subprocess.run", side_effect=FileNotFoundError)
    def test_missing_executable(self, _run):
        result = run_subprocess(["definitely-not-a-command"])
        assert result.returncode == EXIT_NOT_FOUND
        assert "command not found" in result.stderr

    @patch(
        "dotstrap.adapters.shell.runner.subprocess.run",
        side_effect=subprocess.TimeoutExpired(cmd="sleep", timeout=1),
    )
    def test_timeout(self, _run):
        result = run_subprocess(["sleep", "10"], timeout=1)
        assert result.returncode == EXIT_TIMEOUT
        assert "timed out after 1s" in result.stderr

    @patch("dotstrap.adapters.shell.runner.subprocess.run")
    def test_stderr_is_truncated(self, mock_run: MagicMock):
        mock_run.return_value = _completed(returncode=1, stderr="x" * 5000)
        result = run_subprocess(["noisy"])
        assert len(result.stderr) == 2000
