"""
Plugin resolver — packaged install or source clone, plugin by plugin.

For every entry of the plugin table, in declared order:

  1. packaged: the platform packages it and the prober confirms it →
     install with the package manager, then write a wrapper so the
     plugin is reachable by name from ``$ZSH_CUSTOM``;
  2. otherwise git: update an existing checkout (fast-forward only),
     skip a directory that is not a checkout, or shallow-clone.

Plugins are independent. A failure is recorded on that plugin's receipt
and the loop moves on.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from pathlib import Path

from zshinit.adapters.vcs.git import GitAdapter
from zshinit.core.errors import PackageInstallFailed, PluginResolutionFailed
from zshinit.core.models.platform import PlatformProfile
from zshinit.core.models.plugin import PluginSpec
from zshinit.core.models.receipt import Receipt
from zshinit.core.models.settings import Settings
from zshinit.core.services.packages import install_packages
from zshinit.core.services.prober import available
from zshinit.core.services.wrappers import write_wrapper

logger = logging.getLogger(__name__)

Installer = Callable[[PlatformProfile, list[str]], None]


def plugin_dir(spec: PluginSpec, custom_root: Path) -> Path:
    """Where the plugin (or theme) lives under ``$ZSH_CUSTOM``."""
    return custom_root / spec.category / spec.name


def resolve_plugins(
    specs: Iterable[PluginSpec],
    profile: PlatformProfile,
    settings: Settings,
    *,
    git: GitAdapter | None = None,
    probe: Callable[[str, str], bool] = available,
    install: Installer | None = None,
) -> list[Receipt]:
    """Resolve every plugin; never aborts on a single plugin's failure.

    Args:
        specs: Plugin table entries, processed in the given order.
        profile: Detected platform.
        settings: Provides ``$ZSH_CUSTOM`` and the command timeout.
        git: Source-control backend (default: a real :class:`GitAdapter`).
        probe: Availability check, ``probe(pm_id, package) -> bool``.
        install: Package installer, ``install(profile, [package])``.

    Returns:
        One receipt per plugin, in order.
    """
    git = git or GitAdapter(timeout=settings.command_timeout)
    if install is None:
        def install(p: PlatformProfile, names: list[str]) -> None:
            install_packages(p, names, timeout=settings.command_timeout, label=f"Installing {names[0]}")

    custom_root = settings.custom_root
    receipts: list[Receipt] = []

    for spec in specs:
        try:
            receipt = _resolve_one(spec, profile, custom_root, git=git, probe=probe, install=install)
        except OSError as e:
            # Filesystem trouble (permissions, full disk) stays local to this plugin
            logger.error("%s: %s", spec.name, e)
            receipt = Receipt.failure(step="plugin", target=spec.name, error=str(e))

        if receipt.failed:
            logger.warning("Plugin %s failed: %s", spec.name, receipt.error)
            if receipt.output:
                logger.warning("%s", receipt.output)
        receipts.append(receipt)

    return receipts


def _resolve_one(
    spec: PluginSpec,
    profile: PlatformProfile,
    custom_root: Path,
    *,
    git: GitAdapter,
    probe: Callable[[str, str], bool],
    install: Installer,
) -> Receipt:
    package = profile.package_for_plugin(spec.name) if spec.source_kind == "packaged" else None

    if package and probe(profile.package_manager_id, package):
        try:
            install(profile, [package])
        except PackageInstallFailed as e:
            logger.warning(
                "%s: packaged install failed (%s); falling back to git",
                spec.name, e,
            )
        else:
            wrapper = write_wrapper(spec, custom_root)
            return Receipt.success(
                step="plugin",
                target=spec.name,
                output=f"Installed package {package}",
                metadata={
                    "method": "packaged",
                    "action": "installed",
                    "package": package,
                    "wrapper": wrapper.status,
                    "path": wrapper.metadata.get("path", ""),
                },
            )

    return _resolve_from_source(spec, custom_root, git)


def _resolve_from_source(spec: PluginSpec, custom_root: Path, git: GitAdapter) -> Receipt:
    dest = plugin_dir(spec, custom_root)

    if not spec.repository_url:
        err = PluginResolutionFailed(f"{spec.name} has no package here and no repository URL")
        return Receipt.failure(step="plugin", target=spec.name, error=str(err))

    if dest.exists():
        if git.is_repository(dest):
            return git.fast_forward(spec.name, dest)
        logger.warning(
            "%s: %s exists and is not a git checkout; leaving it untouched",
            spec.name, dest,
        )
        return Receipt.skip(
            step="plugin",
            target=spec.name,
            reason=f"{dest} exists and is not a repository",
            metadata={"method": "git", "action": "skipped", "path": str(dest)},
        )

    return git.clone_shallow(spec.name, spec.repository_url, dest)
