"""
Package request models — what to install and how the probe split it.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class PackageRequest(BaseModel):
    """A package the user's environment needs."""

    name: str
    is_optional: bool = False


class PackageSplit(BaseModel):
    """Three-way partition of a request list after probing.

    Every requested name lands in exactly one list; each list keeps the
    order of the original requests.
    """

    installable: list[str] = Field(default_factory=list)
    missing_required: list[str] = Field(default_factory=list)
    missing_optional: list[str] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.installable) + len(self.missing_required) + len(self.missing_optional)

    @property
    def can_install(self) -> bool:
        """False when a required package is unavailable."""
        return not self.missing_required


class PackageReport(BaseModel):
    """What the package step actually did."""

    package_manager: str
    installed: list[str] = Field(default_factory=list)
    missing_optional: list[str] = Field(default_factory=list)
    links: dict[str, str] = Field(default_factory=dict)   # link path → target
    warnings: list[str] = Field(default_factory=list)
