"""
Error taxonomy for the provisioning sequence.

Every error carries a ``fatal`` flag. Fatal errors stop the sequence and
decide the process exit code; recoverable ones are logged, collected as
warnings, and execution continues.
"""

from __future__ import annotations


class ZshInitError(Exception):
    """Base class for all provisioning errors."""

    fatal: bool = True

    def __init__(
        self,
        message: str,
        *,
        returncode: int | None = None,
        output: str = "",
    ) -> None:
        super().__init__(message)
        self.returncode = returncode
        self.output = output

    @property
    def exit_code(self) -> int:
        """Exit code to propagate — the failing subcommand's, or 1."""
        return self.returncode if self.returncode else 1


class UnsupportedPlatform(ZshInitError):
    """No recognised package manager on this host."""


class PrivilegesUnavailable(ZshInitError):
    """A step needs root and sudo is missing or was refused."""


class PackageUpdateFailed(ZshInitError):
    """The package index update command failed."""


class PackageInstallFailed(ZshInitError):
    """Required packages are unavailable or the install command failed."""

    def __init__(
        self,
        message: str,
        *,
        missing: list[str] | None = None,
        returncode: int | None = None,
        output: str = "",
    ) -> None:
        super().__init__(message, returncode=returncode, output=output)
        self.missing = list(missing or [])


class MissingOptionalPackage(ZshInitError):
    """An optional package is not available — installation continues."""

    fatal = False

    def __init__(self, package: str, pm_id: str) -> None:
        super().__init__(f"Optional package '{package}' is not available via {pm_id}; skipping")
        self.package = package
        self.pm_id = pm_id


class PluginResolutionFailed(ZshInitError):
    """Clone or update of a single plugin failed."""

    fatal = False


class FrameworkInstallFailed(ZshInitError):
    """The shell framework installer did not produce its directory."""


class TemplateNotFound(ZshInitError):
    """A configuration template shipped with the tool is missing."""


class ConfigAbsent(ZshInitError):
    """The file to patch does not exist."""

    fatal = False
