"""
Settings model — user-tunable knobs, loaded from an optional YAML file.

Every field has a default, so a missing settings file simply means
"provision the standard environment into the current user's home".
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

OHMYZSH_INSTALL_URL = "https://raw.githubusercontent.com/ohmyzsh/ohmyzsh/master/tools/install.sh"
HOMEBREW_INSTALL_URL = "https://raw.githubusercontent.com/Homebrew/install/HEAD/install.sh"

DEFAULT_REQUIRED_PACKAGES = ["curl", "git", "wget", "zsh"]

# Bundled templates live next to the package code
BUNDLED_TEMPLATES_DIR = Path(__file__).resolve().parent.parent.parent / "templates"


class Settings(BaseModel):
    """Provisioning settings.

    Path fields left as ``None`` are derived from ``home`` (and from
    ``$ZSH_CUSTOM`` for the custom directory, matching Oh My Zsh).
    """

    model_config = ConfigDict(extra="forbid")

    home: Path = Field(default_factory=Path.home)
    zsh_dir: Path | None = None
    zsh_custom: Path | None = None
    templates_dir: Path | None = None

    required_packages: list[str] = Field(default_factory=lambda: list(DEFAULT_REQUIRED_PACKAGES))
    extra_packages: list[str] = Field(default_factory=list)

    framework_install_url: str = OHMYZSH_INSTALL_URL
    homebrew_install_url: str = HOMEBREW_INSTALL_URL
    command_timeout: int = 900
    backup_existing: bool = False

    # Pre-answered prompts (None = ask)
    extra_theme: bool | None = None
    change_shell: bool | None = None

    @property
    def zsh_root(self) -> Path:
        """Oh My Zsh installation directory."""
        return self.zsh_dir or self.home / ".oh-my-zsh"

    @property
    def custom_root(self) -> Path:
        """``$ZSH_CUSTOM`` — where custom plugins and themes go."""
        if self.zsh_custom:
            return self.zsh_custom
        env_custom = os.environ.get("ZSH_CUSTOM")
        if env_custom:
            return Path(env_custom)
        return self.zsh_root / "custom"

    @property
    def templates_root(self) -> Path:
        return self.templates_dir or BUNDLED_TEMPLATES_DIR

    @property
    def zshrc_path(self) -> Path:
        return self.home / ".zshrc"

    @property
    def p10k_path(self) -> Path:
        return self.home / ".p10k.zsh"
