"""
Tests for receipts and the error taxonomy.
"""

from zshinit.core.errors import (
    ConfigAbsent,
    FrameworkInstallFailed,
    MissingOptionalPackage,
    PackageInstallFailed,
    PackageUpdateFailed,
    PluginResolutionFailed,
    UnsupportedPlatform,
    ZshInitError,
)
from zshinit.core.models.receipt import Receipt


class TestReceipt:
    def test_success(self):
        r = Receipt.success(step="plugin", target="zsh-z", output="done")
        assert r.ok and not r.failed and not r.skipped
        assert r.output == "done"

    def test_failure(self):
        r = Receipt.failure(step="plugin", target="zsh-z", error="Clone failed")
        assert r.failed
        assert r.error == "Clone failed"

    def test_skip_reason_is_output(self):
        r = Receipt.skip(step="wrapper", target="x", reason="foreign file")
        assert r.skipped
        assert r.output == "foreign file"

    def test_serializes(self):
        d = Receipt.success(step="dotfile", target=".zshrc", metadata={"path": "/h/.zshrc"}).model_dump(mode="json")
        assert d["status"] == "ok"
        assert d["metadata"]["path"] == "/h/.zshrc"
        assert d["ended_at"]
        assert "started_at" not in d


class TestErrors:
    def test_fatal_flags(self):
        assert UnsupportedPlatform("x").fatal
        assert PackageUpdateFailed("x").fatal
        assert PackageInstallFailed("x").fatal
        assert FrameworkInstallFailed("x").fatal
        assert not MissingOptionalPackage("eza", "apt").fatal
        assert not PluginResolutionFailed("x").fatal
        assert not ConfigAbsent("x").fatal

    def test_exit_code(self):
        assert ZshInitError("x").exit_code == 1
        assert ZshInitError("x", returncode=0).exit_code == 1
        assert PackageUpdateFailed("x", returncode=100).exit_code == 100

    def test_missing_optional_message(self):
        err = MissingOptionalPackage("eza", "apt")
        assert str(err) == "Optional package 'eza' is not available via apt; skipping"
        assert err.package == "eza"

    def test_install_failed_missing(self):
        err = PackageInstallFailed("x", missing=["zsh"])
        assert err.missing == ["zsh"]
        assert isinstance(err, ZshInitError)
