"""
Shared test fixtures and configuration.
"""

from pathlib import Path

import pytest

from zshinit.core.models.platform import PlatformProfile
from zshinit.core.models.settings import Settings
from zshinit.core.services.platform_detect import build_profile


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the caller's settings file and Oh My Zsh layout out of tests."""
    for var in ("ZSHINIT_CONFIG", "ZSH_CUSTOM", "ZSHINIT_LOG_LEVEL", "ZSHINIT_LOG_FILE"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def home(tmp_path: Path) -> Path:
    """A fake home directory."""
    home = tmp_path / "home"
    home.mkdir()
    return home


@pytest.fixture
def settings(home: Path) -> Settings:
    return Settings(home=home, command_timeout=30)


@pytest.fixture
def apt_profile() -> PlatformProfile:
    return build_profile("apt", distro_id="debian", python_version=(3, 11))


@pytest.fixture
def brew_profile() -> PlatformProfile:
    return build_profile("brew", distro_id="macos", python_version=(3, 13))
