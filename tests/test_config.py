"""
Tests for settings loading — lookup order, YAML parsing, validation.
"""

import textwrap
from pathlib import Path

import pytest

from zshinit.core.config.loader import (
    SETTINGS_ENV_VAR,
    ConfigError,
    find_settings_file,
    load_settings,
)
from zshinit.core.models.settings import BUNDLED_TEMPLATES_DIR, Settings


class TestFindSettingsFile:
    def test_explicit_wins(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv(SETTINGS_ENV_VAR, str(tmp_path / "env.yml"))
        path, explicit = find_settings_file(tmp_path / "cli.yml")
        assert path == tmp_path / "cli.yml"
        assert explicit

    def test_env_var(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv(SETTINGS_ENV_VAR, str(tmp_path / "env.yml"))
        path, explicit = find_settings_file()
        assert path == tmp_path / "env.yml"
        assert explicit

    def test_default_location(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        assert find_settings_file() == (None, False)
        config = tmp_path / ".config" / "zshinit" / "config.yml"
        config.parent.mkdir(parents=True)
        config.write_text("extra_theme: true\n")
        assert find_settings_file() == (config, False)


class TestLoadSettings:
    def test_no_file_means_defaults(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        settings = load_settings()
        assert settings.required_packages == ["curl", "git", "wget", "zsh"]
        assert settings.extra_theme is None

    def test_explicit_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            load_settings(tmp_path / "missing.yml")

    def test_full_file(self, tmp_path: Path):
        config = tmp_path / "config.yml"
        config.write_text(textwrap.dedent(f"""\
            home: {tmp_path}
            zsh_custom: {tmp_path}/custom
            extra_packages: [tmux, ripgrep]
            command_timeout: 60
            backup_existing: true
            extra_theme: true
            change_shell: false
        """))
        settings = load_settings(config)
        assert settings.home == tmp_path
        assert settings.custom_root == tmp_path / "custom"
        assert settings.extra_packages == ["tmux", "ripgrep"]
        assert settings.command_timeout == 60
        assert settings.backup_existing
        assert settings.extra_theme is True
        assert settings.change_shell is False

    def test_nested_under_tool_key(self, tmp_path: Path):
        config = tmp_path / "config.yml"
        config.write_text("zshinit:\n  extra_theme: true\n")
        assert load_settings(config).extra_theme is True

    def test_empty_file(self, tmp_path: Path):
        config = tmp_path / "config.yml"
        config.write_text("")
        assert load_settings(config) == Settings()

    def test_invalid_yaml(self, tmp_path: Path):
        config = tmp_path / "config.yml"
        config.write_text("extra_theme: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_settings(config)

    def test_not_a_mapping(self, tmp_path: Path):
        config = tmp_path / "config.yml"
        config.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_settings(config)

    def test_unknown_key(self, tmp_path: Path):
        config = tmp_path / "config.yml"
        config.write_text("colour_scheme: dark\n")
        with pytest.raises(ConfigError, match="Invalid settings"):
            load_settings(config)

    def test_wrong_type(self, tmp_path: Path):
        config = tmp_path / "config.yml"
        config.write_text("command_timeout: soon\n")
        with pytest.raises(ConfigError):
            load_settings(config)

    def test_tilde_is_expanded(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        config = tmp_path / "config.yml"
        config.write_text("templates_dir: ~/templates\n")
        assert load_settings(config).templates_root == tmp_path / "templates"


class TestSettingsPaths:
    def test_derived_paths(self, tmp_path: Path):
        settings = Settings(home=tmp_path)
        assert settings.zsh_root == tmp_path / ".oh-my-zsh"
        assert settings.custom_root == tmp_path / ".oh-my-zsh" / "custom"
        assert settings.zshrc_path == tmp_path / ".zshrc"
        assert settings.p10k_path == tmp_path / ".p10k.zsh"
        assert settings.templates_root == BUNDLED_TEMPLATES_DIR

    def test_zsh_custom_env(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("ZSH_CUSTOM", str(tmp_path / "zc"))
        assert Settings(home=tmp_path).custom_root == tmp_path / "zc"

    def test_bundled_templates_exist(self):
        assert (BUNDLED_TEMPLATES_DIR / "zshrc").is_file()
        assert (BUNDLED_TEMPLATES_DIR / "p10k.zsh").is_file()
