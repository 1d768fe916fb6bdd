"""
PlatformProfile — what the host's package manager looks like.

Built once at startup by platform detection and passed explicitly to
everything that installs or probes packages. Frozen: nothing may change
the platform choice after detection.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class PlatformProfile(BaseModel):
    """Detected package-manager profile of the host."""

    model_config = ConfigDict(frozen=True)

    package_manager_id: str                     # apt, pacman, brew, dnf, pkg
    distro_id: str = ""                         # /etc/os-release ID, "macos", "termux"
    update_command: tuple[str, ...]
    install_command: tuple[str, ...]
    needs_sudo: bool = False

    optional_package_set: tuple[str, ...] = ()
    packaged_plugins: dict[str, str] = Field(default_factory=dict)   # plugin → package
    binary_links: dict[str, str] = Field(default_factory=dict)       # wanted → provided

    python_version: tuple[int, int] | None = None   # host python3, not ours

    def package_for_plugin(self, plugin: str) -> str | None:
        """Package name providing ``plugin`` on this platform, if any."""
        return self.packaged_plugins.get(plugin)

    def offers_optional(self, package: str) -> bool:
        return package in self.optional_package_set
