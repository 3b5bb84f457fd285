"""Risk classifier — per-file tiers and change-set aggregates.

Files matching no keyword pattern default to MEDIUM ("Standard code
change") rather than LOW: an unknown file is treated as ordinary code.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from prsignals.analysis.paths import PathClassifier
from prsignals.config.defaults import (
    HIGH_RATIO_FOR_HIGH,
    HIGH_RATIO_FOR_MEDIUM,
    MEDIUM_RATIO_FOR_MEDIUM,
    RISK_LABELS,
    TIER_WEIGHTS,
)
from prsignals.models.signals import (
    ChangeSetSummary,
    FileRiskAssessment,
    RiskLabel,
    RiskTier,
)

DEFAULT_REASON = "Standard code change"


def overall_tier(high: int, medium: int, low: int) -> RiskTier:
    """Aggregate tier for a change set with the given per-tier counts."""
    total = high + medium + low
    if total == 0:
        return RiskTier.LOW
    high_ratio = high / total
    if high_ratio >= HIGH_RATIO_FOR_HIGH:
        return RiskTier.HIGH
    if high_ratio >= HIGH_RATIO_FOR_MEDIUM:
        return RiskTier.MEDIUM
    if high > 0:
        return RiskTier.MEDIUM
    if medium / total >= MEDIUM_RATIO_FOR_MEDIUM:
        return RiskTier.MEDIUM
    return RiskTier.LOW


def impact_score(assessments: Sequence[FileRiskAssessment]) -> int:
    """Weighted 0-100 score; halves round up."""
    n = len(assessments)
    if n == 0:
        return 0
    weight = sum(TIER_WEIGHTS[a.tier] for a in assessments)
    max_weight = TIER_WEIGHTS[RiskTier.HIGH] * n
    # round(100 * weight / max_weight) with half-up rounding, in integers
    return (200 * weight + max_weight) // (2 * max_weight)


def risk_label(tier: RiskTier) -> RiskLabel:
    """Hosting-platform label for ``tier``."""
    return RISK_LABELS[tier]


class RiskClassifier:
    """Assigns risk tiers to changed paths."""

    def __init__(self, classifier: PathClassifier | None = None) -> None:
        self.classifier = classifier or PathClassifier()

    @classmethod
    def from_config(cls, config) -> "RiskClassifier":
        return cls(PathClassifier.from_config(config))

    def assess_file(self, path: str) -> FileRiskAssessment:
        found = self.classifier.classify_tier(path)
        if found is None:
            return FileRiskAssessment(path=path, tier=RiskTier.MEDIUM, reasons=(DEFAULT_REASON,))
        tier, reason = found
        return FileRiskAssessment(path=path, tier=tier, reasons=(reason,))

    def assess_files(self, paths: Iterable[str]) -> list[FileRiskAssessment]:
        return [self.assess_file(p) for p in paths]

    def calculate_overall_risk(self, paths: Iterable[str]) -> RiskTier:
        return self._summarize(self.assess_files(paths)).overall

    def calculate_impact_score(self, paths: Iterable[str]) -> int:
        return impact_score(self.assess_files(paths))

    def summarize(self, paths: Iterable[str]) -> ChangeSetSummary:
        return self._summarize(self.assess_files(paths))

    @staticmethod
    def _summarize(assessments: Sequence[FileRiskAssessment]) -> ChangeSetSummary:
        counts = {tier: 0 for tier in RiskTier}
        for a in assessments:
            counts[a.tier] += 1
        return ChangeSetSummary(
            overall=overall_tier(counts[RiskTier.HIGH], counts[RiskTier.MEDIUM], counts[RiskTier.LOW]),
            score=impact_score(assessments),
            high=counts[RiskTier.HIGH],
            medium=counts[RiskTier.MEDIUM],
            low=counts[RiskTier.LOW],
            high_risk_files=tuple(a.path for a in assessments if a.tier is RiskTier.HIGH),
        )
