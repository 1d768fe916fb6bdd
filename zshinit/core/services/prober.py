"""
L3 Detection — Package availability prober.

Asks the package manager's metadata subsystem whether it can provide a
package. Read-only: the index is queried, never refreshed.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable, Iterable

from zshinit.core.data.platforms import PROBE_COMMANDS
from zshinit.core.errors import UnsupportedPlatform
from zshinit.core.models.package import PackageRequest, PackageSplit
from zshinit.core.models.platform import PlatformProfile

logger = logging.getLogger(__name__)


def available(pm_id: str, package_name: str) -> bool:
    """Check whether ``pm_id`` can install ``package_name``.

    Uses the metadata query for the given package manager:
      apt    → apt-cache show PKG   (exit 0 *and* a non-empty record)
      pacman → pacman -Si PKG
      brew   → brew info --formula PKG
      dnf    → dnf info -q PKG
      pkg    → pkg show PKG

    Raises:
        UnsupportedPlatform: If ``pm_id`` is not a known package manager.

    Returns:
        True if available, False if not available or the query failed.
    """
    query = PROBE_COMMANDS.get(pm_id)
    if query is None:
        raise UnsupportedPlatform(f"Unknown package manager: {pm_id}")

    try:
        r = subprocess.run(
            [*query, package_name],
            capture_output=True, text=True,
            timeout=60 if pm_id == "brew" else 20,   # brew is slow
        )
    except FileNotFoundError:
        logger.warning(
            "Package query tool not found for pm=%s (checking %s)",
            pm_id, package_name,
        )
        return False
    except subprocess.TimeoutExpired:
        logger.warning("Timeout checking package %s with pm=%s", package_name, pm_id)
        return False
    except OSError as exc:
        logger.warning(
            "OS error checking package %s with pm=%s: %s",
            package_name, pm_id, exc,
        )
        return False

    if r.returncode != 0:
        return False
    if pm_id == "apt":
        # apt-cache exits 0 for purely virtual packages with no record
        return bool(r.stdout.strip())
    return True


def split_requests(
    profile: PlatformProfile,
    requests: Iterable[PackageRequest],
    probe: Callable[[str, str], bool] | None = None,
) -> PackageSplit:
    """Partition requests into installable / missing-required / missing-optional.

    A name requested more than once is probed once and placed at its first
    position; if any request for it is required, it counts as required.
    """
    probe = probe or available
    ordered: list[str] = []
    optional: dict[str, bool] = {}
    for req in requests:
        if req.name not in optional:
            ordered.append(req.name)
            optional[req.name] = req.is_optional
        else:
            optional[req.name] = optional[req.name] and req.is_optional

    split = PackageSplit()
    for name in ordered:
        if probe(profile.package_manager_id, name):
            split.installable.append(name)
        elif optional[name]:
            split.missing_optional.append(name)
        else:
            split.missing_required.append(name)

    logger.debug(
        "Probe split (%s): %d installable, %d missing required, %d missing optional",
        profile.package_manager_id,
        len(split.installable), len(split.missing_required), len(split.missing_optional),
    )
    return split
