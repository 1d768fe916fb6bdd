"""
Package installation — update the index, install what is available.

Required packages that the platform cannot provide abort the step;
optional ones downgrade to warnings. All commands go through the
subprocess runner, which prefixes sudo when the profile needs it.
"""

from __future__ import annotations

import logging
import os
import shutil
from collections.abc import Callable

from zshinit.core.data.platforms import LINK_DIR
from zshinit.core.errors import (
    MissingOptionalPackage,
    PackageInstallFailed,
    PackageUpdateFailed,
    PrivilegesUnavailable,
)
from zshinit.core.execution.subprocess_runner import format_failure, run_command
from zshinit.core.models.package import PackageReport, PackageRequest
from zshinit.core.models.platform import PlatformProfile
from zshinit.core.models.settings import Settings
from zshinit.core.services.prober import available, split_requests

logger = logging.getLogger(__name__)


def build_requests(profile: PlatformProfile, settings: Settings) -> list[PackageRequest]:
    """Required packages first, then the platform's optional set and extras."""
    requests = [PackageRequest(name=name) for name in settings.required_packages]
    for name in [*profile.optional_package_set, *settings.extra_packages]:
        requests.append(PackageRequest(name=name, is_optional=True))
    return requests


def ensure_privileges(profile: PlatformProfile) -> None:
    """Make sure root commands will work before anything is attempted.

    Runs ``sudo -v`` interactively once, so the password prompt appears
    up front instead of under a spinner.

    Raises:
        PrivilegesUnavailable: sudo is required but missing or refused.
    """
    if not profile.needs_sudo or os.geteuid() == 0:
        return
    if shutil.which("sudo") is None:
        raise PrivilegesUnavailable("This tool requires sudo or root privileges.")

    logger.info("Some tasks need root privileges; asking for the sudo password")
    result = run_command(["sudo", "-v"], interactive=True, timeout=300)
    if not result["ok"]:
        raise PrivilegesUnavailable(
            "sudo authentication failed",
            returncode=result.get("returncode"),
        )


def update_index(profile: PlatformProfile, *, timeout: int = 900) -> None:
    """Refresh the package index.

    Raises:
        PackageUpdateFailed: carrying the command's exit code and output.
    """
    result = run_command(
        list(profile.update_command),
        needs_sudo=profile.needs_sudo,
        timeout=timeout,
        label="Updating packages",
    )
    if not result["ok"]:
        raise PackageUpdateFailed(
            f"Package update failed ({profile.package_manager_id})",
            returncode=result.get("returncode"),
            output=format_failure(result),
        )


def install_packages(
    profile: PlatformProfile,
    names: list[str],
    *,
    timeout: int = 900,
    label: str = "Installing packages",
) -> None:
    """Install ``names`` in a single package-manager call.

    Raises:
        PackageInstallFailed: carrying the command's exit code and output.
    """
    if not names:
        return
    result = run_command(
        [*profile.install_command, *names],
        needs_sudo=profile.needs_sudo,
        timeout=timeout,
        label=label,
    )
    if not result["ok"]:
        raise PackageInstallFailed(
            f"Package install failed ({profile.package_manager_id}): {' '.join(names)}",
            returncode=result.get("returncode"),
            output=format_failure(result),
        )


def link_binaries(profile: PlatformProfile, *, link_dir: str = LINK_DIR) -> dict[str, str]:
    """Expose programs under their usual names (``bat`` for ``batcat``).

    Only links when the wanted name is absent and the provided one exists.
    A failed link is a warning, never an error.

    Returns:
        ``{link_path: target}`` for each link created.
    """
    created: dict[str, str] = {}
    for wanted, provided in profile.binary_links.items():
        if shutil.which(wanted):
            continue
        target = shutil.which(provided)
        if not target:
            continue
        link = os.path.join(link_dir, wanted)
        result = run_command(
            ["ln", "-sf", target, link],
            needs_sudo=profile.needs_sudo,
            timeout=30,
        )
        if result["ok"]:
            created[link] = target
            logger.info("Linked %s → %s", link, target)
        else:
            logger.warning("Could not link %s → %s: %s", link, target, result.get("error"))
    return created


def install_requested(
    profile: PlatformProfile,
    requests: list[PackageRequest],
    *,
    timeout: int = 900,
    probe: Callable[[str, str], bool] = available,
) -> PackageReport:
    """Update, probe, install and link — the whole package step.

    Raises:
        PackageUpdateFailed: index refresh failed.
        PackageInstallFailed: a required package is unavailable, or the
            install command failed.
    """
    report = PackageReport(package_manager=profile.package_manager_id)

    update_index(profile, timeout=timeout)

    split = split_requests(profile, requests, probe=probe)
    if not split.can_install:
        raise PackageInstallFailed(
            "Required packages are not available via "
            f"{profile.package_manager_id}: {', '.join(split.missing_required)}",
            missing=split.missing_required,
        )

    for name in split.missing_optional:
        warning = MissingOptionalPackage(name, profile.package_manager_id)
        logger.warning("%s", warning)
        report.warnings.append(str(warning))
    report.missing_optional = list(split.missing_optional)

    install_packages(profile, split.installable, timeout=timeout)
    report.installed = list(split.installable)

    report.links = link_binaries(profile)
    return report
