"""
L4 Execution — Core subprocess runner.

The SINGLE PLACE where external commands are started. Sudo prefixing,
output capture, timeouts and the progress indicator are centralised
here. Callers get a plain result dict and decide what a failure means.
"""

from __future__ import annotations

import logging
import os
import subprocess
import tempfile
import time
from typing import Any

from zshinit.core.observability.progress import Spinner

logger = logging.getLogger(__name__)

# Tail of each captured stream kept for error dumps
_OUTPUT_TAIL = 2000


def _sudo_prefix(cmd: list[str], needs_sudo: bool) -> list[str]:
    """Prefix ``sudo`` when the command needs root and we aren't root."""
    if needs_sudo and os.geteuid() != 0:
        return ["sudo", *cmd]
    return list(cmd)


def _build_env(env_overrides: dict[str, str] | None) -> dict[str, str]:
    env = os.environ.copy()
    if env_overrides:
        for key, value in env_overrides.items():
            env[key] = os.path.expandvars(value)
    return env


def run_command(
    cmd: list[str],
    *,
    needs_sudo: bool = False,
    timeout: int = 900,
    env_overrides: dict[str, str] | None = None,
    cwd: str | None = None,
    label: str | None = None,
    interactive: bool = False,
) -> dict[str, Any]:
    """Run a command to completion.

    Non-interactive commands run in the background with stdin closed and
    stdout/stderr spooled to temporary files, so a chatty child can never
    block on a full pipe while the spinner polls it.

    Args:
        cmd: Command list (argv).
        needs_sudo: Whether the command requires root.
        timeout: Seconds before the child is killed.
        env_overrides: Extra env vars (values get ``$VAR`` expansion).
        cwd: Working directory for the command.
        label: Progress label; when given, a spinner tracks the child.
        interactive: Inherit the terminal (for ``sudo -v``, ``chsh``).
            Nothing is captured.

    Returns:
        ``{"ok": True, "returncode": 0, "stdout": "...", "stderr": "...",
        "elapsed_ms": N}`` on success, ``{"ok": False, "error": "...",
        "returncode": N, ...}`` on failure.
    """
    cmd = _sudo_prefix(cmd, needs_sudo)
    env = _build_env(env_overrides)

    logger.debug("Executing: %s (cwd=%s)", " ".join(cmd), cwd)
    start = time.monotonic()

    if interactive:
        return _run_interactive(cmd, env=env, cwd=cwd, timeout=timeout, start=start)

    with _spool() as out, _spool() as err:
        try:
            proc = subprocess.Popen(
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=out,
                stderr=err,
                text=True,
                env=env,
                cwd=cwd,
            )
        except FileNotFoundError:
            return {
                "ok": False,
                "returncode": 127,
                "error": f"Command not found: {cmd[0]}",
                "stdout": "",
                "stderr": "",
            }
        except OSError as e:
            logger.exception("Subprocess error: %s", cmd)
            return {"ok": False, "returncode": 126, "error": str(e), "stdout": "", "stderr": ""}

        try:
            if label:
                returncode = Spinner(label).track(proc, timeout=timeout)
            else:
                try:
                    returncode = proc.wait(timeout=timeout)
                except subprocess.TimeoutExpired:
                    returncode = None
        except KeyboardInterrupt:
            proc.terminate()
            proc.wait()
            raise

        elapsed_ms = int((time.monotonic() - start) * 1000)

        if returncode is None:
            proc.kill()
            proc.wait()
            logger.warning("Command timed out after %ss: %s", timeout, cmd)
            return {
                "ok": False,
                "returncode": 124,
                "error": f"Command timed out ({timeout}s)",
                "stdout": _tail(out),
                "stderr": _tail(err),
                "elapsed_ms": elapsed_ms,
            }

        stdout, stderr = _tail(out), _tail(err)

    if returncode == 0:
        return {
            "ok": True,
            "returncode": 0,
            "stdout": stdout,
            "stderr": stderr,
            "elapsed_ms": elapsed_ms,
        }

    return {
        "ok": False,
        "returncode": returncode,
        "error": f"Command failed (exit {returncode})",
        "stdout": stdout,
        "stderr": stderr,
        "elapsed_ms": elapsed_ms,
    }


def _run_interactive(
    cmd: list[str],
    *,
    env: dict[str, str],
    cwd: str | None,
    timeout: int,
    start: float,
) -> dict[str, Any]:
    """Run with the terminal attached (password prompts and the like)."""
    try:
        result = subprocess.run(cmd, env=env, cwd=cwd, timeout=timeout)
    except FileNotFoundError:
        return {"ok": False, "returncode": 127, "error": f"Command not found: {cmd[0]}"}
    except subprocess.TimeoutExpired:
        return {"ok": False, "returncode": 124, "error": f"Command timed out ({timeout}s)"}

    elapsed_ms = int((time.monotonic() - start) * 1000)
    if result.returncode == 0:
        return {"ok": True, "returncode": 0, "stdout": "", "stderr": "", "elapsed_ms": elapsed_ms}
    return {
        "ok": False,
        "returncode": result.returncode,
        "error": f"Command failed (exit {result.returncode})",
        "stdout": "",
        "stderr": "",
        "elapsed_ms": elapsed_ms,
    }


def _spool() -> Any:
    """Anonymous temp file that receives one of the child's streams."""
    return tempfile.TemporaryFile(mode="w+", encoding="utf-8", errors="replace")


def _tail(stream: Any) -> str:
    stream.seek(0)
    return stream.read()[-_OUTPUT_TAIL:]


def format_failure(result: dict[str, Any]) -> str:
    """Render a failed result as a captured-output dump for the user."""
    parts = [result.get("error") or "Command failed"]
    for key in ("stderr", "stdout"):
        text = (result.get(key) or "").strip()
        if text:
            parts.append(f"--- {key} ---\n{text}")
    return "\n".join(parts)
