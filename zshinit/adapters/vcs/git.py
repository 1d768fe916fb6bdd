"""
Git adapter — fetch plugin sources.

Shallow clone, fast-forward update and the "is this a repository?"
check, all through the git CLI. Operations return receipts; a failing
git command becomes a failed receipt carrying git's own output.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path

from zshinit.core.errors import PluginResolutionFailed
from zshinit.core.execution.subprocess_runner import format_failure, run_command
from zshinit.core.models.receipt import Receipt

logger = logging.getLogger(__name__)


class GitAdapter:
    """Source-control backend for plugins.

    Args:
        timeout: Seconds allowed per git command.
        show_progress: Draw a spinner while cloning / pulling.
    """

    step = "plugin"

    def __init__(self, timeout: int = 300, show_progress: bool = True) -> None:
        self.timeout = timeout
        self.show_progress = show_progress

    def is_repository(self, path: Path) -> bool:
        """True if ``path`` is the top of a git work tree."""
        if not path.is_dir():
            return False
        if (path / ".git").exists():
            return True
        result = run_command(
            ["git", "-C", str(path), "rev-parse", "--show-toplevel"],
            timeout=30,
        )
        if not result["ok"]:
            return False
        return Path(result["stdout"].strip()).resolve() == path.resolve()

    # ── Operations ──────────────────────────────────────────────

    def clone_shallow(self, name: str, url: str, dest: Path) -> Receipt:
        """``git clone --depth=1 URL DEST``."""
        start = time.monotonic()
        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            output = self._git(
                ["clone", "--depth=1", url, str(dest)],
                label=f"Cloning {name}",
            )
        except (PluginResolutionFailed, OSError) as e:
            return Receipt.failure(
                step=self.step,
                target=name,
                error=f"Clone failed: {e}",
                output=getattr(e, "output", ""),
                duration_ms=_ms_since(start),
                metadata={"method": "git", "action": "clone", "url": url, "path": str(dest)},
            )
        return Receipt.success(
            step=self.step,
            target=name,
            output=output,
            duration_ms=_ms_since(start),
            metadata={"method": "git", "action": "cloned", "url": url, "path": str(dest)},
        )

    def fast_forward(self, name: str, path: Path) -> Receipt:
        """``git -C PATH pull --ff-only``."""
        start = time.monotonic()
        try:
            output = self._git(
                ["-C", str(path), "pull", "--ff-only"],
                label=f"Updating {name}",
            )
        except PluginResolutionFailed as e:
            return Receipt.failure(
                step=self.step,
                target=name,
                error=f"Update failed: {e}",
                output=e.output,
                duration_ms=_ms_since(start),
                metadata={"method": "git", "action": "update", "path": str(path)},
            )
        return Receipt.success(
            step=self.step,
            target=name,
            output=output,
            duration_ms=_ms_since(start),
            metadata={"method": "git", "action": "updated", "path": str(path)},
        )

    # ── Helpers ─────────────────────────────────────────────────

    def _git(self, args: list[str], label: str | None = None) -> str:
        """Run a git command and return stdout."""
        result = run_command(
            ["git", *args],
            timeout=self.timeout,
            label=label if self.show_progress else None,
            env_overrides={"GIT_TERMINAL_PROMPT": "0"},
        )
        if not result["ok"]:
            # git puts the useful line ("fatal: ...") last on stderr
            stderr = (result.get("stderr") or "").strip()
            message = stderr.splitlines()[-1] if stderr else result.get("error", "git failed")
            raise PluginResolutionFailed(
                message,
                returncode=result.get("returncode"),
                output=format_failure(result),
            )
        return result.get("stdout", "").strip()

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} timeout={self.timeout}>"


def _ms_since(start: float) -> int:
    return int((time.monotonic() - start) * 1000)
