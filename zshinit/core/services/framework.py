"""
Shell framework — Oh My Zsh, installed unattended.

The upstream installer normally starts a new shell, runs ``chsh`` and
replaces ``~/.zshrc``. All three are turned off: the login shell and the
dotfiles are separate steps of this tool.
"""

from __future__ import annotations

import logging
import time

from zshinit.core.errors import FrameworkInstallFailed
from zshinit.core.execution.subprocess_runner import format_failure, run_command
from zshinit.core.models.receipt import Receipt
from zshinit.core.models.settings import Settings

logger = logging.getLogger(__name__)

INSTALLER_ENV = {"RUNZSH": "no", "CHSH": "no", "KEEP_ZSHRC": "yes"}


def installer_command(url: str) -> list[str]:
    # The URL travels as $0 so it is never spliced into shell text
    return ["sh", "-c", 'sh -c "$(curl -fsSL "$0")" "" --unattended', url]


def install_framework(settings: Settings) -> Receipt:
    """Install Oh My Zsh into ``settings.zsh_root`` unless it is already there.

    Raises:
        FrameworkInstallFailed: the installer finished but the framework
            directory does not exist.
    """
    target = settings.zsh_root
    if target.is_dir():
        logger.info("Oh My Zsh already present at %s", target)
        return Receipt.skip(
            step="framework",
            target="oh-my-zsh",
            reason=f"{target} already exists",
            metadata={"path": str(target)},
        )

    start = time.monotonic()
    env = dict(INSTALLER_ENV)
    if settings.zsh_dir is not None:
        env["ZSH"] = str(settings.zsh_dir)

    result = run_command(
        installer_command(settings.framework_install_url),
        timeout=settings.command_timeout,
        env_overrides=env,
        cwd=str(settings.home),
        label="Installing Oh My Zsh",
    )

    if not target.is_dir():
        raise FrameworkInstallFailed(
            f"Oh My Zsh installation failed: {target} was not created",
            returncode=result.get("returncode") or None,
            output=format_failure(result),
        )
    if not result["ok"]:
        # Directory exists, so the framework is usable; keep the noise visible
        logger.warning("Oh My Zsh installer exited with %s", result.get("returncode"))

    return Receipt.success(
        step="framework",
        target="oh-my-zsh",
        output=result.get("stdout", ""),
        duration_ms=int((time.monotonic() - start) * 1000),
        metadata={"path": str(target), "url": settings.framework_install_url},
    )
