"""
Tests for plugin wrapper generation.
"""

from pathlib import Path

from zshinit.core.data.plugins import get_plugin
from zshinit.core.services.wrappers import (
    WRAPPER_HEADER,
    is_generated,
    render_wrapper,
    wrapper_path,
    write_wrapper,
)


class TestRenderWrapper:
    def test_candidates_in_order(self):
        spec = get_plugin("zsh-autosuggestions")
        text = render_wrapper(spec)
        positions = [text.index(path) for path in spec.candidate_paths]
        assert positions == sorted(positions)
        assert text.startswith(WRAPPER_HEADER + "\n")
        assert "break" in text
        assert text.rstrip().endswith("unset _zshinit_candidate")

    def test_post_source_env(self):
        text = render_wrapper(get_plugin("zsh-syntax-highlighting"))
        assert 'export ZSH_HIGHLIGHT_HIGHLIGHTERS_DIR="${_zshinit_candidate:h}/highlighters"' in text

    def test_no_env_for_plain_plugin(self):
        assert "export" not in render_wrapper(get_plugin("zsh-autosuggestions"))

    def test_sources_the_candidate(self):
        text = render_wrapper(get_plugin("zsh-autosuggestions"))
        assert 'if [[ -r "$_zshinit_candidate" ]]; then' in text
        assert 'source "$_zshinit_candidate"' in text


class TestWriteWrapper:
    def test_writes_at_deterministic_path(self, tmp_path: Path):
        spec = get_plugin("zsh-autosuggestions")
        receipt = write_wrapper(spec, tmp_path)
        expected = tmp_path / "plugins" / "zsh-autosuggestions" / "zsh-autosuggestions.plugin.zsh"
        assert receipt.ok
        assert wrapper_path(spec, tmp_path) == expected
        assert expected.read_text() == render_wrapper(spec)
        assert is_generated(expected)

    def test_regenerates_own_file(self, tmp_path: Path):
        spec = get_plugin("zsh-autosuggestions")
        target = wrapper_path(spec, tmp_path)
        target.parent.mkdir(parents=True)
        target.write_text(WRAPPER_HEADER + "\n# stale\n")
        assert write_wrapper(spec, tmp_path).ok
        assert target.read_text() == render_wrapper(spec)

    def test_never_overwrites_foreign_file(self, tmp_path: Path):
        spec = get_plugin("zsh-autosuggestions")
        target = wrapper_path(spec, tmp_path)
        target.parent.mkdir(parents=True)
        target.write_text("source ~/my/own/copy.zsh\n")
        receipt = write_wrapper(spec, tmp_path)
        assert receipt.skipped
        assert target.read_text() == "source ~/my/own/copy.zsh\n"

    def test_skips_git_checkout(self, tmp_path: Path):
        spec = get_plugin("zsh-syntax-highlighting")
        target = wrapper_path(spec, tmp_path)
        (target.parent / ".git").mkdir(parents=True)
        receipt = write_wrapper(spec, tmp_path)
        assert receipt.skipped
        assert not target.exists()

    def test_is_generated_missing_file(self, tmp_path: Path):
        assert not is_generated(tmp_path / "nope.zsh")
