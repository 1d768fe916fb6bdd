"""
Domain models — Pydantic types for the provisioner.

All models are re-exported here for convenient access:

    from zshinit.core.models import PlatformProfile, PluginSpec, Receipt
"""

from zshinit.core.models.package import PackageReport, PackageRequest, PackageSplit
from zshinit.core.models.platform import PlatformProfile
from zshinit.core.models.plugin import PluginSpec
from zshinit.core.models.receipt import Receipt
from zshinit.core.models.settings import Settings

__all__ = [
    # package.py
    "PackageReport",
    "PackageRequest",
    "PackageSplit",
    # platform.py
    "PlatformProfile",
    # plugin.py
    "PluginSpec",
    # receipt.py
    "Receipt",
    # settings.py
    "Settings",
]
