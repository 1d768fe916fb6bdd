"""
L0 Data — Plugin table.

One entry per plugin or theme, in the order the resolver processes them.
Plugin identity only matters through the data here: the resolver and
the wrapper generator never branch on a plugin's name.
"""

from __future__ import annotations

from zshinit.core.models.plugin import PluginSpec

_SHARE_DIRS: tuple[str, ...] = (
    "/usr/share",                 # Debian, Ubuntu, Fedora
    "/usr/share/zsh/plugins",     # Arch
    "/opt/homebrew/share",        # Homebrew, Apple silicon
    "/usr/local/share",           # Homebrew, Intel; manual installs
)


def _candidates(name: str) -> tuple[str, ...]:
    """Every location a packaged ``name`` may have dropped its script."""
    return tuple(f"{base}/{name}/{name}.zsh" for base in _SHARE_DIRS)


PLUGIN_TABLE: tuple[PluginSpec, ...] = (
    PluginSpec(
        name="zsh-autosuggestions",
        source_kind="packaged",
        candidate_paths=_candidates("zsh-autosuggestions"),
        repository_url="https://github.com/zsh-users/zsh-autosuggestions.git",
    ),
    PluginSpec(
        name="zsh-syntax-highlighting",
        source_kind="packaged",
        candidate_paths=_candidates("zsh-syntax-highlighting"),
        repository_url="https://github.com/zsh-users/zsh-syntax-highlighting.git",
        post_source_env={"ZSH_HIGHLIGHT_HIGHLIGHTERS_DIR": "highlighters"},
    ),
    PluginSpec(
        name="you-should-use",
        source_kind="git",
        repository_url="https://github.com/MichaelAquilina/zsh-you-should-use.git",
    ),
    PluginSpec(
        name="zsh-bat",
        source_kind="git",
        repository_url="https://github.com/fdellwing/zsh-bat.git",
    ),
    PluginSpec(
        name="zsh-z",
        source_kind="git",
        repository_url="https://github.com/agkozak/zsh-z.git",
    ),
    PluginSpec(
        name="powerlevel10k",
        source_kind="git",
        repository_url="https://github.com/romkatv/powerlevel10k.git",
        category="themes",
    ),
)

# Oh My Zsh plugin order for the ``plugins=(...)`` line. Bundled plugins
# first; zsh-syntax-highlighting must load last.
PLUGIN_ORDER: tuple[str, ...] = (
    "git",
    "extract",
    "command-not-found",
    "zsh-z",
    "zsh-bat",
    "you-should-use",
    "thefuck",
    "zsh-autosuggestions",
    "zsh-syntax-highlighting",
)

# Included in PLUGIN_ORDER only when the platform can run it
CONDITIONAL_PLUGIN = "thefuck"


def get_plugin(name: str) -> PluginSpec | None:
    """Look up a plugin spec by name."""
    for spec in PLUGIN_TABLE:
        if spec.name == name:
            return spec
    return None
