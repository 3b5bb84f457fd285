"""Tunable analysis constants.

The risk ratios, weights and the vagueness threshold are hand-tuned
heuristics. They are kept at these exact values so results stay
reproducible across releases.
"""

from __future__ import annotations

from prsignals.models.signals import RiskLabel, RiskTier

ANALYSIS_DEFAULTS: dict = {
    # Sanitizer
    "exclude_lockfiles": True,
    "exclude_non_code_assets": True,
    "exclude_tests": False,
    "exclude_configs": False,
    # Ghost commits
    "ghost_sensitivity": 0.3,
    # Title vagueness (score >= threshold is vague)
    "title_vagueness_threshold": 70,
    # Token budget
    "provider": "openai",
    # Size thresholds in changed lines (0 disables)
    "size_warning_lines": 0,
    "size_block_lines": 0,
}

# Aggregate risk ratios.
HIGH_RATIO_FOR_HIGH = 0.20
HIGH_RATIO_FOR_MEDIUM = 0.10
MEDIUM_RATIO_FOR_MEDIUM = 0.50

# Per-file weights for the impact score.
TIER_WEIGHTS: dict[RiskTier, int] = {
    RiskTier.HIGH: 10,
    RiskTier.MEDIUM: 5,
    RiskTier.LOW: 1,
}

# Truncation removes LOW first and keeps HIGH longest.
DEFAULT_REMOVAL_ORDER: tuple[RiskTier, ...] = (RiskTier.LOW, RiskTier.MEDIUM, RiskTier.HIGH)

# Token estimate: ~4 characters per token, fixed cost per hunk header.
CHARS_PER_TOKEN = 4
HUNK_OVERHEAD_TOKENS = 3

# Ghost commit detection
MAX_COMMITS_ANALYZED = 20
MAX_MISSING_KEYWORDS_REPORTED = 8

# Title suggestion
MAX_TITLE_LENGTH = 80

RISK_LABELS: dict[RiskTier, RiskLabel] = {
    RiskTier.HIGH: RiskLabel(
        name="prsignals/high-risk",
        color="d73a4a",
        description="High risk change based on impact scoring",
    ),
    RiskTier.MEDIUM: RiskLabel(
        name="prsignals/medium-risk",
        color="fbca04",
        description="Medium risk change based on impact scoring",
    ),
    RiskTier.LOW: RiskLabel(
        name="prsignals/low-risk",
        color="0e8a16",
        description="Low risk change based on impact scoring",
    ),
}
