"""
L3 Detection — Platform profile.

Read-only probes that pick the host's package manager and build the
immutable ``PlatformProfile`` every later step receives. Nothing here
installs or writes anything.
"""

from __future__ import annotations

import logging
import os
import platform
import shutil
import subprocess
from collections.abc import Callable, Mapping

from zshinit.core.data.platforms import DETECTION_ORDER, PLATFORMS
from zshinit.core.data.plugins import CONDITIONAL_PLUGIN, PLUGIN_ORDER
from zshinit.core.errors import UnsupportedPlatform
from zshinit.core.models.platform import PlatformProfile

logger = logging.getLogger(__name__)

# thefuck imports the ``imp`` module, which Python 3.12 removed
_THEFUCK_MAX_PYTHON = (3, 12)


def _read_os_release_id(path: str = "/etc/os-release") -> str:
    """Distro ID from os-release, or "" when unavailable."""
    try:
        with open(path, encoding="utf-8") as f:
            for line in f:
                if line.startswith("ID="):
                    return line.strip().split("=", 1)[1].strip('"')
    except (FileNotFoundError, OSError):
        pass
    return ""


def _is_termux(env: Mapping[str, str]) -> bool:
    return "com.termux" in env.get("PREFIX", "")


def _host_python_version(which: Callable[[str], str | None]) -> tuple[int, int] | None:
    """Version of the system ``python3`` (not the interpreter running us)."""
    python = which("python3")
    if not python:
        return None
    try:
        r = subprocess.run(
            [python, "-c", "import sys; print('%d.%d' % sys.version_info[:2])"],
            capture_output=True, text=True, timeout=10,
        )
    except (FileNotFoundError, subprocess.TimeoutExpired, OSError) as exc:
        logger.warning("Could not query %s for its version: %s", python, exc)
        return None
    if r.returncode != 0:
        return None
    try:
        major, minor = r.stdout.strip().split(".")[:2]
        return int(major), int(minor)
    except ValueError:
        return None


def detect_package_manager(
    which: Callable[[str], str | None] = shutil.which,
    env: Mapping[str, str] | None = None,
) -> str:
    """Return the first supported package manager found on this host.

    Raises:
        UnsupportedPlatform: If none of the known managers is present.
    """
    env = os.environ if env is None else env
    for pm_id in DETECTION_ORDER:
        if pm_id == "pkg" and not _is_termux(env):
            # FreeBSD also has a ``pkg`` binary
            continue
        if which(PLATFORMS[pm_id]["binary"]):
            return pm_id
    raise UnsupportedPlatform(
        "Unsupported package manager: none of "
        + ", ".join(PLATFORMS[p]["binary"] for p in DETECTION_ORDER)
        + " found on PATH"
    )


def build_profile(
    pm_id: str,
    *,
    distro_id: str = "",
    python_version: tuple[int, int] | None = None,
) -> PlatformProfile:
    """Build the profile for a known package manager id."""
    entry = PLATFORMS.get(pm_id)
    if entry is None:
        raise UnsupportedPlatform(f"Unknown package manager: {pm_id}")
    return PlatformProfile(
        package_manager_id=pm_id,
        distro_id=distro_id,
        update_command=tuple(entry["update"]),
        install_command=tuple(entry["install"]),
        needs_sudo=entry["needs_sudo"],
        optional_package_set=tuple(entry["optional"]),
        packaged_plugins=dict(entry["packaged_plugins"]),
        binary_links=dict(entry["binary_links"]),
        python_version=python_version,
    )


def detect_platform(
    which: Callable[[str], str | None] = shutil.which,
    env: Mapping[str, str] | None = None,
) -> PlatformProfile:
    """Detect the host platform once, at startup."""
    env = os.environ if env is None else env
    pm_id = detect_package_manager(which, env)

    if pm_id == "brew" or platform.system() == "Darwin":
        distro_id = "macos" if platform.system() == "Darwin" else "linuxbrew"
    elif pm_id == "pkg":
        distro_id = "termux"
    else:
        distro_id = _read_os_release_id()

    profile = build_profile(
        pm_id,
        distro_id=distro_id,
        python_version=_host_python_version(which),
    )
    logger.info(
        "Detected platform: pm=%s distro=%s python3=%s",
        profile.package_manager_id, profile.distro_id or "?", profile.python_version,
    )
    return profile


# ── Plugin-list predicate ───────────────────────────────────────

def supports_thefuck(profile: PlatformProfile) -> bool:
    """Whether the thefuck plugin can work on this platform.

    Homebrew's formula carries its own patched interpreter; everywhere
    else it runs on the system python3, which must predate 3.12.
    """
    if not profile.offers_optional("thefuck"):
        return False
    if profile.package_manager_id == "brew":
        return True
    if profile.python_version is None:
        return False
    return profile.python_version < _THEFUCK_MAX_PYTHON


def canonical_plugins(profile: PlatformProfile | None) -> list[str]:
    """The plugin order written into ``plugins=(...)`` for this platform."""
    include_conditional = profile is not None and supports_thefuck(profile)
    return [
        name for name in PLUGIN_ORDER
        if name != CONDITIONAL_PLUGIN or include_conditional
    ]
