"""
Tests for the git adapter (git CLI mocked at the runner boundary).
"""

from pathlib import Path
from unittest.mock import patch

from zshinit.adapters.vcs.git import GitAdapter

OK = {"ok": True, "returncode": 0, "stdout": "Cloning into 'x'...\n", "stderr": "", "elapsed_ms": 5}
FAILED = {
    "ok": False,
    "returncode": 128,
    "error": "Command failed (exit 128)",
    "stdout": "",
    "stderr": "Cloning into 'x'...\nfatal: unable to access 'https://nope/': Could not resolve host: nope\n",
}


class TestGitAdapter:
    def test_repr(self):
        assert repr(GitAdapter(timeout=60)) == "<GitAdapter timeout=60>"

    @patch("zshinit.adapters.vcs.git.run_command", return_value=OK)
    def test_clone_shallow(self, mock_run, tmp_path: Path):
        dest = tmp_path / "plugins" / "zsh-z"
        receipt = GitAdapter(show_progress=False).clone_shallow("zsh-z", "https://x/zsh-z.git", dest)

        assert receipt.ok
        assert receipt.metadata["action"] == "cloned"
        argv = mock_run.call_args.args[0]
        assert argv == ["git", "clone", "--depth=1", "https://x/zsh-z.git", str(dest)]
        assert mock_run.call_args.kwargs["env_overrides"] == {"GIT_TERMINAL_PROMPT": "0"}
        assert mock_run.call_args.kwargs["label"] is None
        assert dest.parent.is_dir()

    @patch("zshinit.adapters.vcs.git.run_command", return_value=FAILED)
    def test_clone_failure_is_a_receipt(self, _mock_run, tmp_path: Path):
        receipt = GitAdapter().clone_shallow("zsh-z", "https://nope/", tmp_path / "zsh-z")
        assert receipt.failed
        assert "Could not resolve host" in receipt.error
        assert "--- stderr ---" in receipt.output

    @patch("zshinit.adapters.vcs.git.run_command", return_value=OK)
    def test_fast_forward(self, mock_run, tmp_path: Path):
        receipt = GitAdapter().fast_forward("zsh-z", tmp_path)
        assert receipt.ok
        assert receipt.metadata["action"] == "updated"
        assert mock_run.call_args.args[0] == ["git", "-C", str(tmp_path), "pull", "--ff-only"]
        assert mock_run.call_args.kwargs["label"] == "Updating zsh-z"

    @patch("zshinit.adapters.vcs.git.run_command", return_value=FAILED)
    def test_fast_forward_failure(self, _mock_run, tmp_path: Path):
        receipt = GitAdapter().fast_forward("zsh-z", tmp_path)
        assert receipt.failed
        assert receipt.error.startswith("Update failed: fatal:")


class TestIsRepository:
    def test_missing_dir(self, tmp_path: Path):
        assert not GitAdapter().is_repository(tmp_path / "nope")

    def test_dot_git(self, tmp_path: Path):
        (tmp_path / ".git").mkdir()
        assert GitAdapter().is_repository(tmp_path)

    @patch("zshinit.adapters.vcs.git.run_command")
    def test_subdirectory_of_another_repo(self, mock_run, tmp_path: Path):
        mock_run.return_value = {**OK, "stdout": f"{tmp_path}\n"}
        sub = tmp_path / "plugins" / "foreign"
        sub.mkdir(parents=True)
        assert not GitAdapter().is_repository(sub)

    @patch("zshinit.adapters.vcs.git.run_command")
    def test_toplevel_reported_by_git(self, mock_run, tmp_path: Path):
        mock_run.return_value = {**OK, "stdout": f"{tmp_path}\n"}
        assert GitAdapter().is_repository(tmp_path)

    @patch("zshinit.adapters.vcs.git.run_command", return_value=FAILED)
    def test_not_a_repository(self, _mock_run, tmp_path: Path):
        assert not GitAdapter().is_repository(tmp_path)
