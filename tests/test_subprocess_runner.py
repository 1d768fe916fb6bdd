"""
Tests for the subprocess runner — real child processes via the test interpreter.
"""

import sys
from unittest.mock import patch

from zshinit.core.execution.subprocess_runner import (
    _sudo_prefix,
    format_failure,
    run_command,
)

PY = sys.executable


class TestRunCommand:
    def test_success_captures_output(self):
        result = run_command([PY, "-c", "print('hello')"])
        assert result["ok"]
        assert result["returncode"] == 0
        assert result["stdout"].strip() == "hello"
        assert result["elapsed_ms"] >= 0

    def test_failure_keeps_exit_code_and_stderr(self):
        result = run_command([PY, "-c", "import sys; sys.stderr.write('boom'); sys.exit(3)"])
        assert not result["ok"]
        assert result["returncode"] == 3
        assert "boom" in result["stderr"]
        assert "exit 3" in result["error"]

    def test_command_not_found(self):
        result = run_command(["definitely-not-a-command-zshinit"])
        assert not result["ok"]
        assert result["returncode"] == 127
        assert "Command not found" in result["error"]

    def test_timeout(self):
        result = run_command([PY, "-c", "import time; time.sleep(10)"], timeout=1)
        assert not result["ok"]
        assert result["returncode"] == 124
        assert "timed out" in result["error"]

    def test_output_tail_is_bounded(self):
        result = run_command([PY, "-c", "print('x' * 10000)"])
        assert len(result["stdout"]) == 2000

    def test_env_overrides(self):
        result = run_command(
            [PY, "-c", "import os; print(os.environ['ZSHINIT_TEST_VAR'])"],
            env_overrides={"ZSHINIT_TEST_VAR": "set"},
        )
        assert result["stdout"].strip() == "set"

    def test_large_output_does_not_block(self):
        # Far beyond a pipe buffer; must not deadlock
        result = run_command([PY, "-c", "print('y' * 500000)"], timeout=30)
        assert result["ok"]

    def test_with_label_uses_spinner(self):
        with patch("zshinit.core.execution.subprocess_runner.Spinner") as mock_spinner:
            mock_spinner.return_value.track.return_value = 0
            result = run_command([PY, "-c", "pass"], label="Doing things")
        assert result["ok"]
        mock_spinner.assert_called_once_with("Doing things")

    def test_interactive_does_not_capture(self):
        result = run_command([PY, "-c", "import sys; sys.exit(2)"], interactive=True)
        assert not result["ok"]
        assert result["returncode"] == 2
        assert result["stdout"] == ""


class TestSudoPrefix:
    @patch("zshinit.core.execution.subprocess_runner.os.geteuid", return_value=1000)
    def test_prefixes_for_regular_user(self, _euid):
        assert _sudo_prefix(["apt-get", "update"], True) == ["sudo", "apt-get", "update"]

    @patch("zshinit.core.execution.subprocess_runner.os.geteuid", return_value=0)
    def test_root_runs_directly(self, _euid):
        assert _sudo_prefix(["apt-get", "update"], True) == ["apt-get", "update"]

    def test_not_needed(self):
        assert _sudo_prefix(["brew", "update"], False) == ["brew", "update"]


class TestFormatFailure:
    def test_dump_contains_streams(self):
        text = format_failure({"error": "Command failed (exit 1)", "stdout": "out", "stderr": "err"})
        assert text.splitlines()[0] == "Command failed (exit 1)"
        assert "--- stderr ---\nerr" in text
        assert "--- stdout ---\nout" in text

    def test_empty_streams_omitted(self):
        assert format_failure({"error": "x", "stdout": "", "stderr": " "}) == "x"
