"""
Tests for fixer/executor.py — the execution shim.

Covers:
  - run_command:  exit status → bool, missing binary, timeout, sudo prefix
  - capture:      stdout/stderr, error shapes
  - cache_sudo_credentials
"""

import subprocess
from unittest.mock import MagicMock, patch

from maclockdown.fixer.executor import (
    cache_sudo_credentials,
    capture,
    command_available,
    run_command,
)


# ── run_command ───────────────────────────────────────────────────────────────

class TestRunCommand:
    def test_zero_exit_returns_true(self):
        assert run_command(["true"]) is True

    def test_nonzero_exit_returns_false(self):
        # `false` is a POSIX command that always exits 1
        assert run_command(["false"]) is False

    def test_missing_binary_returns_false(self):
        assert run_command(["this_command_definitely_does_not_exist_9999"]) is False

    def test_timeout_returns_false(self):
        with patch(
            "maclockdown.fixer.executor.subprocess.run",
            side_effect=subprocess.TimeoutExpired(cmd="x", timeout=1),
        ):
            assert run_command(["sleep", "10"], timeout=1) is False

    def test_input_is_passed_to_process(self):
        with patch("maclockdown.fixer.executor.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=0, stderr="")
            run_command(["cat"], input="payload")
        assert mock_run.call_args.kwargs["input"] == "payload"

    def test_sudo_prefixes_command_when_not_root(self):
        with patch("maclockdown.fixer.executor._is_root", return_value=False), \
             patch("maclockdown.fixer.executor.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=0, stderr="")
            run_command(["spctl", "--master-enable"], sudo=True)
        assert mock_run.call_args.args[0] == ["sudo", "spctl", "--master-enable"]

    def test_sudo_not_prefixed_when_root(self):
        with patch("maclockdown.fixer.executor._is_root", return_value=True), \
             patch("maclockdown.fixer.executor.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=0, stderr="")
            run_command(["spctl", "--master-enable"], sudo=True)
        assert mock_run.call_args.args[0] == ["spctl", "--master-enable"]

    def test_runs_in_c_locale(self):
        with patch("maclockdown.fixer.executor.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=0, stderr="")
            run_command(["true"])
        env = mock_run.call_args.kwargs["env"]
        assert env["LC_ALL"] == "C"


# ── capture ───────────────────────────────────────────────────────────────────

class TestCapture:
    def test_returns_stdout(self):
        rc, out, err = capture(["echo", "lockdown"])
        assert rc == 0
        assert out.strip() == "lockdown"
        assert err == ""

    def test_missing_binary(self):
        rc, out, err = capture(["this_command_definitely_does_not_exist_9999"])
        assert rc == -1
        assert "not found" in err

    def test_timeout_message(self):
        rc, out, err = capture(["sleep", "10"], timeout=1)
        assert rc == -1
        assert "timed out" in err.lower()

    def test_stderr_captured_on_nonzero_exit(self):
        rc, out, err = capture(["ls", "/path/that/does/not/exist/xyzzy"])
        assert rc != 0
        assert err


# ── sudo caching ──────────────────────────────────────────────────────────────

class TestCacheSudoCredentials:
    def test_root_needs_no_prompt(self):
        with patch("maclockdown.fixer.executor._is_root", return_value=True), \
             patch("maclockdown.fixer.executor.subprocess.run") as mock_run:
            assert cache_sudo_credentials() is True
        mock_run.assert_not_called()

    def test_runs_sudo_v(self):
        with patch("maclockdown.fixer.executor._is_root", return_value=False), \
             patch("maclockdown.fixer.executor.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=0)
            assert cache_sudo_credentials() is True
        assert mock_run.call_args.args[0] == ["sudo", "-v"]

    def test_failed_prompt_returns_false(self):
        with patch("maclockdown.fixer.executor._is_root", return_value=False), \
             patch("maclockdown.fixer.executor.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=1)
            assert cache_sudo_credentials() is False

    def test_missing_sudo_returns_false(self):
        with patch("maclockdown.fixer.executor._is_root", return_value=False), \
             patch("maclockdown.fixer.executor.subprocess.run", side_effect=FileNotFoundError):
            assert cache_sudo_credentials() is False


class TestCommandAvailable:
    def test_tool_in_path(self):
        assert command_available("sh") is True

    def test_absolute_path_missing(self):
        assert command_available("/no/such/binary/xyzzy") is False
