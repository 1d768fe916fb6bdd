"""
Config patcher — idempotent rewrite of ``~/.zshrc``.

The document is scanned line by line with a small state machine:

    NORMAL ──start marker──▶ IN_MANAGED_BLOCK ──end marker──▶ NORMAL
    NORMAL ──"plugins=(" without ")"──▶ IN_PLUGIN_LIST ──")"──▶ NORMAL

A ``)`` inside a comment does not close the plugin list.

The managed fetch block is owned by the patcher: its old content is
dropped and the canonical block is emitted in its place (or appended once
at end of file if no start marker exists). Outside the block, three line
kinds are rewritten (legacy fetch calls, the plugin list, the ``ls``
alias) and the pywal lines are optionally un-commented. Every other line
passes through untouched, in order.

Running the patcher on its own output changes nothing.
"""

from __future__ import annotations

import logging
import os
import stat
import tempfile
from collections.abc import Iterable, Sequence
from enum import StrEnum
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict

from zshinit.core.errors import ConfigAbsent
from zshinit.core.services.platform_detect import canonical_plugins

logger = logging.getLogger(__name__)


# ── Recognised lines ────────────────────────────────────────────

BLOCK_START = "# >>> zshinit managed fetch block >>>"
BLOCK_END = "# <<< zshinit managed fetch block <<<"

MANAGED_BLOCK: tuple[str, ...] = (
    BLOCK_START,
    "if command -v fastfetch >/dev/null 2>&1; then",
    "  fastfetch",
    "elif command -v neofetch >/dev/null 2>&1; then",
    "  neofetch",
    "fi",
    BLOCK_END,
)

LEGACY_FETCH_COMMANDS = frozenset({"neofetch", "fastfetch"})

PLUGIN_LIST_PREFIX = "plugins=("

LS_ALIAS_PREFIX = "alias ls="
CANONICAL_LS_ALIAS = (
    "if (( $+commands[eza] )); then "
    "alias ls='eza --icons --group-directories-first'; "
    "else alias ls='ls -F'; fi"
)

EXTRA_THEME_LINES = frozenset({
    "(cat ~/.cache/wal/sequences &)",
    "cat ~/.cache/wal/sequences",
    "source ~/.cache/wal/colors-tty.sh",
})


class ScanState(StrEnum):
    NORMAL = "normal"
    IN_MANAGED_BLOCK = "in_managed_block"
    IN_PLUGIN_LIST = "in_plugin_list"


class PatchOptions(BaseModel):
    """What the patcher is allowed to switch on."""

    model_config = ConfigDict(frozen=True)

    use_extra_theme: bool = False


class PatchResult(BaseModel):
    """Outcome of :func:`patch_config`."""

    status: Literal["ok", "skipped"]
    path: str
    reason: str = ""
    changed: bool = False
    lines_before: int = 0
    lines_after: int = 0


# ── Line predicates ─────────────────────────────────────────────


def _indent(line: str) -> str:
    return line[: len(line) - len(line.lstrip())]


def _commented_extra_theme(line: str) -> str | None:
    """The un-commented body of a pywal line, or None if it is not one."""
    stripped = line.strip()
    if not stripped.startswith("#"):
        return None
    body = stripped[1:].strip()
    return body if body in EXTRA_THEME_LINES else None


def _code_part(stripped: str) -> str:
    """``stripped`` up to its first unquoted comment."""
    quote = ""
    for i, ch in enumerate(stripped):
        if quote:
            if ch == quote:
                quote = ""
        elif ch in "'\"":
            quote = ch
        elif ch == "#" and (i == 0 or stripped[i - 1].isspace()):
            return stripped[:i].rstrip()
    return stripped


def _closes_list(stripped: str) -> bool:
    return ")" in _code_part(stripped)


def plugin_line(plugins: Sequence[str]) -> str:
    return f"{PLUGIN_LIST_PREFIX}{' '.join(plugins)})"


# ── Scanner ─────────────────────────────────────────────────────


def patch_lines(
    lines: Sequence[str],
    options: PatchOptions,
    plugins: Sequence[str],
) -> list[str]:
    """Apply every rewrite to ``lines`` (no trailing newlines) and return the result.

    Pure: no I/O, same input always gives the same output.
    """
    plugins_decl = plugin_line(plugins)
    out: list[str] = []

    state = ScanState.NORMAL
    block_seen = False
    plugins_seen = False
    # Index of the line that opened the current block / plugin list
    opened_at = -1

    i = 0
    while True:
        if i >= len(lines):
            if state is ScanState.NORMAL:
                break
            # Unterminated region: keep what follows the opening line
            logger.debug("Unterminated %s opened at line %d; rescanning", state, opened_at + 1)
            state = ScanState.NORMAL
            i = opened_at + 1
            continue

        line = lines[i]
        stripped = line.strip()

        if state is ScanState.IN_MANAGED_BLOCK:
            if stripped == BLOCK_END:
                state = ScanState.NORMAL
            i += 1
            continue

        if state is ScanState.IN_PLUGIN_LIST:
            if _closes_list(stripped):
                state = ScanState.NORMAL
            i += 1
            continue

        if stripped == BLOCK_START:
            if not block_seen:
                out.extend(MANAGED_BLOCK)
                block_seen = True
            state = ScanState.IN_MANAGED_BLOCK
            opened_at = i
        elif stripped == BLOCK_END:
            pass  # orphan end marker
        elif stripped in LEGACY_FETCH_COMMANDS:
            pass
        elif stripped.startswith(PLUGIN_LIST_PREFIX):
            if not plugins_seen:
                out.append(_indent(line) + plugins_decl)
                plugins_seen = True
            if not _closes_list(stripped):
                state = ScanState.IN_PLUGIN_LIST
                opened_at = i
        elif stripped.startswith(LS_ALIAS_PREFIX):
            out.append(_indent(line) + CANONICAL_LS_ALIAS)
        else:
            body = _commented_extra_theme(line) if options.use_extra_theme else None
            out.append(line if body is None else _indent(line) + body)
        i += 1

    if not block_seen:
        out.extend(MANAGED_BLOCK)
    return out


def patch_text(text: str, options: PatchOptions, plugins: Sequence[str]) -> str:
    """Patch a whole document; the result ends with a newline unless empty."""
    lines = patch_lines(text.splitlines(), options, plugins)
    return "\n".join(lines) + "\n" if lines else ""


# ── File I/O ────────────────────────────────────────────────────


def _atomic_write(path: Path, content: str) -> None:
    """Replace ``path`` with ``content`` via a temp file in the same directory."""
    mode = stat.S_IMODE(path.stat().st_mode)
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    tmp = Path(tmp_path)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(content)
        os.chmod(tmp, mode)
        os.replace(tmp, path)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise


def _read_document(path: Path) -> str:
    if not path.is_file():
        raise ConfigAbsent(f"{path} does not exist; nothing to patch")
    return path.read_text(encoding="utf-8")


def patch_config(
    path: Path,
    options: PatchOptions,
    *,
    plugins: Iterable[str] | None = None,
) -> PatchResult:
    """Patch ``path`` in place.

    A missing file is not an error: the result is ``skipped`` with reason
    ``config_absent``. The file is only rewritten when its content changes.

    Args:
        path: The shell configuration file.
        options: Patch switches.
        plugins: Canonical plugin list (default: the list for no profile).
    """
    plugins = canonical_plugins(None) if plugins is None else list(plugins)
    # Symlinked configs are patched at their target
    target = path.resolve()

    try:
        original = _read_document(target)
    except ConfigAbsent as e:
        logger.info("%s", e)
        return PatchResult(status="skipped", path=str(path), reason="config_absent")

    patched = patch_text(original, options, plugins)
    before = len(original.splitlines())
    after = len(patched.splitlines())

    if patched == original:
        logger.debug("%s already up to date", path)
        return PatchResult(
            status="ok", path=str(path), changed=False,
            lines_before=before, lines_after=after,
        )

    try:
        _atomic_write(target, patched)
    except OSError as e:
        logger.error("Failed to write %s: %s", target, e)
        raise
    logger.info("Patched %s (%d → %d lines)", path, before, after)
    return PatchResult(
        status="ok", path=str(path), changed=True,
        lines_before=before, lines_after=after,
    )
