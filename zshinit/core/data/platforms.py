"""
L0 Data — Package-manager table.

Pure data. No logic. One entry per supported package manager, in
detection order. Commands are argv lists; ``needs_sudo`` tells the
runner to prefix ``sudo`` when not already root.
"""

from __future__ import annotations

# Detection order matters: Termux ships apt too, and macOS users may
# have a stray pacman from a toolchain. The first hit wins.
DETECTION_ORDER: tuple[str, ...] = ("pkg", "pacman", "brew", "apt", "dnf")

PLATFORMS: dict[str, dict] = {
    "pacman": {
        "binary": "pacman",
        "update": ["pacman", "-Syu", "--noconfirm"],
        "install": ["pacman", "-S", "--noconfirm", "--needed"],
        "needs_sudo": True,
        "optional": ["bat", "btop", "eza", "fastfetch", "fzf", "neofetch", "neovim", "thefuck"],
        "packaged_plugins": {
            "zsh-autosuggestions": "zsh-autosuggestions",
            "zsh-syntax-highlighting": "zsh-syntax-highlighting",
        },
        "binary_links": {},
    },
    "brew": {
        "binary": "brew",
        "update": ["brew", "update"],
        "install": ["brew", "install"],
        "needs_sudo": False,
        "optional": ["bat", "btop", "eza", "fastfetch", "fzf", "neofetch", "neovim", "thefuck"],
        "packaged_plugins": {
            "zsh-autosuggestions": "zsh-autosuggestions",
            "zsh-syntax-highlighting": "zsh-syntax-highlighting",
        },
        "binary_links": {},
    },
    "apt": {
        "binary": "apt-get",
        "update": ["apt-get", "update"],
        "install": ["apt-get", "install", "-y"],
        "needs_sudo": True,
        "optional": ["bat", "btop", "eza", "fastfetch", "fzf", "neofetch", "neovim", "thefuck"],
        "packaged_plugins": {
            "zsh-autosuggestions": "zsh-autosuggestions",
            "zsh-syntax-highlighting": "zsh-syntax-highlighting",
        },
        # Debian/Ubuntu ship bat's binary as batcat
        "binary_links": {"bat": "batcat"},
    },
    "dnf": {
        "binary": "dnf",
        "update": ["dnf", "makecache"],
        "install": ["dnf", "install", "-y"],
        "needs_sudo": True,
        "optional": ["bat", "btop", "eza", "fastfetch", "fzf", "neovim", "thefuck"],
        "packaged_plugins": {
            "zsh-autosuggestions": "zsh-autosuggestions",
            "zsh-syntax-highlighting": "zsh-syntax-highlighting",
        },
        "binary_links": {},
    },
    "pkg": {
        "binary": "pkg",
        "update": ["pkg", "upgrade", "-y"],
        "install": ["pkg", "install", "-y"],
        "needs_sudo": False,
        "optional": ["bat", "btop", "eza", "fastfetch", "fzf", "neofetch", "neovim"],
        "packaged_plugins": {},
        "binary_links": {},
    },
}

# Metadata queries used by the availability prober. Exit code 0 means
# the package manager knows the package.
PROBE_COMMANDS: dict[str, list[str]] = {
    "apt": ["apt-cache", "show"],
    "pacman": ["pacman", "-Si"],
    "brew": ["brew", "info", "--formula"],
    "dnf": ["dnf", "info", "-q"],
    "pkg": ["pkg", "show"],
}

# Where a program wanted under one name is symlinked when the package
# ships it under another.
LINK_DIR = "/usr/local/bin"
