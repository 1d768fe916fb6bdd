"""
Homebrew bootstrap — give a fresh Mac a package manager.

macOS ships without one. When ``brew`` is missing there, the official
installer is run once, its ``bin`` directory is put on ``PATH`` for the
rest of this process, and platform detection can proceed normally.
"""

from __future__ import annotations

import logging
import os
import platform
import shutil
import time
from collections.abc import Callable
from pathlib import Path

from zshinit.core.errors import PrivilegesUnavailable, UnsupportedPlatform
from zshinit.core.execution.subprocess_runner import format_failure, run_command
from zshinit.core.models.receipt import Receipt
from zshinit.core.models.settings import Settings

logger = logging.getLogger(__name__)

# Apple Silicon first, then Intel
BREW_BIN_DIRS = (Path("/opt/homebrew/bin"), Path("/usr/local/bin"))


def installer_command(url: str) -> list[str]:
    return ["/bin/bash", "-c", '/bin/bash -c "$(curl -fsSL "$0")"', url]


def needs_homebrew(
    which: Callable[[str], str | None] = shutil.which,
    system: Callable[[], str] = platform.system,
) -> bool:
    """True on macOS when no ``brew`` is reachable."""
    return system() == "Darwin" and which("brew") is None


def _locate_brew(which: Callable[[str], str | None]) -> Path | None:
    found = which("brew")
    if found:
        return Path(found)
    for bin_dir in BREW_BIN_DIRS:
        candidate = bin_dir / "brew"
        if candidate.is_file():
            return candidate
    return None


def _prepend_path(bin_dir: Path) -> None:
    entries = os.environ.get("PATH", "").split(os.pathsep)
    if str(bin_dir) not in entries:
        os.environ["PATH"] = os.pathsep.join([str(bin_dir), *filter(None, entries)])


def bootstrap_homebrew(
    settings: Settings,
    *,
    which: Callable[[str], str | None] = shutil.which,
) -> Receipt:
    """Install Homebrew non-interactively.

    The installer needs an admin password; ``sudo -v`` is run first in
    the terminal so the installer itself never prompts.

    Raises:
        PrivilegesUnavailable: sudo authentication was refused.
        UnsupportedPlatform: the installer finished but no ``brew`` exists.
    """
    start = time.monotonic()

    auth = run_command(["sudo", "-v"], interactive=True, timeout=300)
    if not auth["ok"]:
        raise PrivilegesUnavailable(
            "sudo authentication failed; Homebrew needs an administrator account",
            returncode=auth.get("returncode"),
        )

    result = run_command(
        installer_command(settings.homebrew_install_url),
        timeout=settings.command_timeout,
        env_overrides={"NONINTERACTIVE": "1"},
        cwd=str(settings.home),
        label="Installing Homebrew",
    )

    brew = _locate_brew(which)
    if brew is None:
        raise UnsupportedPlatform(
            "Homebrew installation failed: brew not found afterwards",
            returncode=result.get("returncode") or None,
            output=format_failure(result),
        )
    if not result["ok"]:
        logger.warning("Homebrew installer exited with %s", result.get("returncode"))

    _prepend_path(brew.parent)
    logger.info("Homebrew installed at %s", brew)
    return Receipt.success(
        step="homebrew",
        target="brew",
        output=result.get("stdout", ""),
        duration_ms=int((time.monotonic() - start) * 1000),
        metadata={"path": str(brew), "url": settings.homebrew_install_url},
    )
