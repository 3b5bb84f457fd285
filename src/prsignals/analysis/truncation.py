"""Token budget truncation — fit a file list into a model's context budget.

Greedy by priority: files are ranked most-important tier first (smallest
first within a tier) and accepted while the running total stays within the
budget. A file that does not fit is dropped whole and the scan continues
with the next one. This is an approximation, not optimal bin packing.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Sequence

from prsignals.analysis.risk import RiskClassifier
from prsignals.config.defaults import CHARS_PER_TOKEN, DEFAULT_REMOVAL_ORDER, HUNK_OVERHEAD_TOKENS
from prsignals.models.diff import FileChange
from prsignals.models.signals import RiskTier

logger = logging.getLogger(__name__)


def estimate_text_tokens(text: str) -> int:
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def estimate_file_tokens(change: FileChange) -> int:
    """Path cost plus, per hunk, a fixed header cost and each line's cost."""
    tokens = estimate_text_tokens(change.new_path)
    for hunk in change.hunks:
        tokens += HUNK_OVERHEAD_TOKENS
        tokens += sum(estimate_text_tokens(line.text) for line in hunk.lines)
    return tokens


def total_tokens(files: Sequence[FileChange]) -> int:
    return sum(estimate_file_tokens(f) for f in files)


def needs_truncation(files: Sequence[FileChange], max_tokens: int) -> bool:
    return total_tokens(files) > max_tokens


@dataclass(frozen=True)
class _Weighted:
    change: FileChange
    tier: RiskTier
    tokens: int


class TokenBudgetTruncator:
    """Selects the files that fit a token budget, keeping risky files longest.

    ``removal_order`` lists tiers from first-removed to last-removed.
    """

    def __init__(
        self,
        risk: RiskClassifier | None = None,
        removal_order: Sequence[RiskTier] = DEFAULT_REMOVAL_ORDER,
    ) -> None:
        if sorted(removal_order) != sorted(RiskTier):
            raise ValueError("removal_order must list each RiskTier exactly once")
        self.risk = risk or RiskClassifier()
        self.removal_order = tuple(removal_order)

    def _rank(self, tier: RiskTier) -> int:
        # 0 = most important (removed last)
        return len(self.removal_order) - 1 - self.removal_order.index(tier)

    def weigh(self, files: Sequence[FileChange]) -> list[_Weighted]:
        return [
            _Weighted(
                change=f,
                tier=self.risk.assess_file(f.new_path).tier,
                tokens=estimate_file_tokens(f),
            )
            for f in files
        ]

    def truncate(self, files: Sequence[FileChange], max_tokens: int) -> list[FileChange]:
        """Return the kept files in priority order (most important first)."""
        if max_tokens < 0:
            raise ValueError(f"max_tokens must be >= 0, got {max_tokens}")

        def key(w: _Weighted) -> tuple[int, int, str]:
            return (self._rank(w.tier), w.tokens, w.change.new_path)

        running = 0
        kept: list[_Weighted] = []
        for w in sorted(self.weigh(files), key=key):
            if running + w.tokens <= max_tokens:
                kept.append(w)
                running += w.tokens
            else:
                logger.debug(
                    "Dropping %s (%d tokens, %s) over budget %d",
                    w.change.new_path, w.tokens, w.tier.name, max_tokens,
                )

        if len(kept) < len(files):
            logger.info(
                "Truncated diff to %d/%d files (%d/%d tokens)",
                len(kept), len(files), running, max_tokens,
            )
        return [w.change for w in sorted(kept, key=key)]
