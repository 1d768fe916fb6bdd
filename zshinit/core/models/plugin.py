"""
PluginSpec — one entry of the static plugin table.

A tagged variant: ``source_kind`` says how the plugin is preferably
obtained, ``candidate_paths`` where a packaged copy may live, and
``post_source_env`` any per-plugin environment setup the wrapper must
perform after sourcing.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class PluginSpec(BaseModel):
    """A shell plugin (or theme) known to the resolver."""

    model_config = ConfigDict(frozen=True)

    name: str
    source_kind: Literal["packaged", "git"]
    candidate_paths: tuple[str, ...] = ()       # ordered; first readable wins
    repository_url: str | None = None
    category: Literal["plugins", "themes"] = "plugins"

    # env var → sub-directory of the located plugin's directory
    post_source_env: dict[str, str] = Field(default_factory=dict)

    @property
    def wrapper_filename(self) -> str:
        """File name Oh My Zsh looks for inside the plugin directory."""
        return f"{self.name}.plugin.zsh"
