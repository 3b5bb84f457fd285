"""prsignals — deterministic change-set signals for pull request tooling."""

__version__ = "0.1.0"
