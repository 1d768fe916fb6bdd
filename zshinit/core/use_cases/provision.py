"""
Provision use case — the whole setup sequence, in order.

    [homebrew] → detect → privileges → packages → framework → plugins
                      → dotfiles → patch ~/.zshrc → login shell

A fatal error stops the sequence and is recorded on the result together
with the exit code to propagate. Recoverable problems (an optional
package, one plugin, chsh) end up in ``warnings`` or as failed receipts.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from zshinit.core.data.plugins import PLUGIN_TABLE
from zshinit.core.errors import ZshInitError
from zshinit.core.models.package import PackageReport
from zshinit.core.models.platform import PlatformProfile
from zshinit.core.models.receipt import Receipt
from zshinit.core.models.settings import Settings
from zshinit.core.services.dotfiles import install_dotfiles
from zshinit.core.services.framework import install_framework
from zshinit.core.services.homebrew import bootstrap_homebrew, needs_homebrew
from zshinit.core.services.login_shell import change_login_shell
from zshinit.core.services.packages import build_requests, ensure_privileges, install_requested
from zshinit.core.services.patcher import PatchOptions, PatchResult, patch_config
from zshinit.core.services.platform_detect import canonical_plugins, detect_platform
from zshinit.core.services.plugins import resolve_plugins

logger = logging.getLogger(__name__)


@dataclass
class ProvisionResult:
    """Everything one provisioning run did."""

    profile: PlatformProfile | None = None
    packages: PackageReport | None = None
    receipts: list[Receipt] = field(default_factory=list)
    patch: PatchResult | None = None
    warnings: list[str] = field(default_factory=list)
    error: str | None = None
    error_output: str = ""
    returncode: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None

    def receipts_for(self, step: str) -> list[Receipt]:
        return [r for r in self.receipts if r.step == step]

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "returncode": self.returncode,
            "error": self.error,
            "error_output": self.error_output,
            "platform": self.profile.model_dump(mode="json") if self.profile else None,
            "packages": self.packages.model_dump(mode="json") if self.packages else None,
            "receipts": [r.model_dump(mode="json") for r in self.receipts],
            "patch": self.patch.model_dump(mode="json") if self.patch else None,
            "warnings": self.warnings,
        }


def run_provision(
    settings: Settings,
    *,
    extra_theme: bool = False,
    change_shell: bool = True,
    skip_packages: bool = False,
    skip_plugins: bool = False,
) -> ProvisionResult:
    """Run the provisioning sequence.

    Args:
        settings: Loaded settings.
        extra_theme: Un-comment the pywal lines in ``~/.zshrc``.
        change_shell: Make zsh the login shell at the end.
        skip_packages: Do not touch the package manager.
        skip_plugins: Do not install or update plugins.

    Returns:
        ProvisionResult; ``error``/``returncode`` are set on a fatal error.
    """
    result = ProvisionResult()

    try:
        if not skip_packages and needs_homebrew():
            result.receipts.append(bootstrap_homebrew(settings))
        result.profile = detect_platform()
        profile = result.profile

        if not skip_packages:
            ensure_privileges(profile)
            result.packages = install_requested(
                profile,
                build_requests(profile, settings),
                timeout=settings.command_timeout,
            )
            result.warnings.extend(result.packages.warnings)

        result.receipts.append(install_framework(settings))

        if not skip_plugins:
            plugin_receipts = resolve_plugins(PLUGIN_TABLE, profile, settings)
            result.receipts.extend(plugin_receipts)
            for r in plugin_receipts:
                if r.failed:
                    result.warnings.append(f"Plugin {r.target}: {r.error}")

        result.receipts.extend(install_dotfiles(settings))

        result.patch = patch_config(
            settings.zshrc_path,
            PatchOptions(use_extra_theme=extra_theme),
            plugins=canonical_plugins(profile),
        )
    except ZshInitError as e:
        logger.error("%s", e)
        result.error = str(e)
        result.error_output = e.output
        result.returncode = e.exit_code
        return result

    if change_shell:
        shell_receipt = change_login_shell()
        result.receipts.append(shell_receipt)
        if shell_receipt.failed:
            result.warnings.append(f"Login shell unchanged: {shell_receipt.error}")

    return result
