"""
Login shell — switch the user's default shell to zsh.

``chsh`` asks for the user's password, so it runs attached to the
terminal. A refusal leaves the current shell in place and is reported
as a failed receipt, not an error.
"""

from __future__ import annotations

import logging
import os
import shutil
from collections.abc import Callable, Mapping

from zshinit.core.execution.subprocess_runner import run_command
from zshinit.core.models.receipt import Receipt

logger = logging.getLogger(__name__)


def current_shell_is_zsh(env: Mapping[str, str] | None = None) -> bool:
    env = os.environ if env is None else env
    return os.path.basename(env.get("SHELL", "")) == "zsh"


def change_login_shell(
    *,
    which: Callable[[str], str | None] = shutil.which,
    env: Mapping[str, str] | None = None,
) -> Receipt:
    """Run ``chsh -s $(which zsh)`` unless zsh is already the login shell."""
    if current_shell_is_zsh(env):
        return Receipt.skip(step="login_shell", target="zsh", reason="zsh is already the login shell")

    zsh = which("zsh")
    if not zsh:
        logger.warning("zsh not found on PATH; login shell unchanged")
        return Receipt.failure(step="login_shell", target="zsh", error="zsh not found on PATH")

    logger.info("Changing login shell to %s", zsh)
    result = run_command(["chsh", "-s", zsh], interactive=True, timeout=300)
    if not result["ok"]:
        logger.warning("chsh failed (%s); change it later with: chsh -s %s", result.get("error"), zsh)
        return Receipt.failure(
            step="login_shell",
            target="zsh",
            error=result.get("error") or "chsh failed",
            metadata={"path": zsh, "returncode": result.get("returncode")},
        )
    return Receipt.success(
        step="login_shell",
        target="zsh",
        output=f"Login shell set to {zsh}",
        metadata={"path": zsh},
    )
