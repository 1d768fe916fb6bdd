"""zshinit — move a user from bash to a provisioned zsh environment."""

__version__ = "0.1.0"
