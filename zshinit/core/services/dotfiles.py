"""
Dotfile installation — delete and recopy from templates.

There is no merge: the shipped ``zshrc`` and ``p10k.zsh`` replace the
user's files, which the patcher then adjusts in place. With
``backup_existing`` the previous file is kept next to it first.
"""

from __future__ import annotations

import logging
import shutil
from datetime import datetime
from pathlib import Path

from zshinit.core.errors import TemplateNotFound
from zshinit.core.models.receipt import Receipt
from zshinit.core.models.settings import Settings

logger = logging.getLogger(__name__)


def dotfile_map(settings: Settings) -> list[tuple[Path, Path]]:
    """``(template, destination)`` pairs, in install order."""
    root = settings.templates_root
    return [
        (root / "zshrc", settings.zshrc_path),
        (root / "p10k.zsh", settings.p10k_path),
    ]


def backup_path(path: Path, now: datetime | None = None) -> Path:
    stamp = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
    return path.with_name(f"{path.name}.bak.{stamp}")


def install_dotfile(template: Path, dest: Path, *, backup: bool = False) -> Receipt:
    """Replace ``dest`` with a copy of ``template``.

    Raises:
        TemplateNotFound: ``template`` does not exist.
    """
    if not template.is_file():
        raise TemplateNotFound(f"Template not found: {template}")

    backed_up = ""
    if dest.exists() or dest.is_symlink():
        if backup and dest.is_file():
            saved = backup_path(dest)
            shutil.copy2(dest, saved)
            backed_up = str(saved)
            logger.info("Backed up %s → %s", dest, saved)
        dest.unlink()

    dest.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(template, dest)
    logger.info("Installed %s", dest)

    metadata = {"template": str(template), "path": str(dest)}
    if backed_up:
        metadata["backup"] = backed_up
    return Receipt.success(
        step="dotfile",
        target=dest.name,
        output=f"Copied {template.name} → {dest}",
        metadata=metadata,
    )


def install_dotfiles(settings: Settings) -> list[Receipt]:
    """Install every dotfile; stops at the first missing template."""
    # Check all templates first so a missing one leaves the home untouched
    pairs = dotfile_map(settings)
    for template, _dest in pairs:
        if not template.is_file():
            raise TemplateNotFound(f"Template not found: {template}")
    return [
        install_dotfile(template, dest, backup=settings.backup_existing)
        for template, dest in pairs
    ]
