"""Ghost commit detection — commit messages that do not match their diff.

A commit is flagged when too few of the meaningful words in its message
appear anywhere in its own diff. Generic VCS verbs ("fix", "update", ...)
are stop words: they say nothing about which code changed.

Stateless and deterministic: the same (message, diff, sensitivity) always
gives the same finding.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, Sequence

from prsignals.config.defaults import ANALYSIS_DEFAULTS, MAX_MISSING_KEYWORDS_REPORTED
from prsignals.errors import ConfigurationError
from prsignals.models.signals import CommitRecord, GhostFinding

logger = logging.getLogger(__name__)

NO_DIFF_REASON = "No diff available for commit"

STOP_WORDS: frozenset[str] = frozenset({
    # English function words
    "the", "and", "for", "with", "from", "into", "onto", "that", "this",
    "these", "those", "are", "was", "were", "been", "being", "have", "has",
    "had", "not", "but", "all", "any", "some", "its", "our", "your", "their",
    "when", "then", "than", "also", "more", "less", "via", "per", "out",
    "now", "just", "only", "can", "should", "will", "would", "use", "used",
    "using", "new", "old", "few", "too", "very", "etc",
    # Generic VCS verbs
    "fix", "fixes", "fixed", "fixing", "update", "updates", "updated",
    "updating", "add", "adds", "added", "adding", "remove", "removes",
    "removed", "removing", "delete", "deleted", "change", "changes",
    "changed", "modify", "modified", "refactor", "refactored", "cleanup",
    "clean", "improve", "improved", "implement", "implemented", "create",
    "created", "move", "moved", "rename", "renamed", "bump", "merge",
    "merged", "revert", "reverted", "tweak", "minor", "wip", "misc",
    # Generic nouns
    "code", "file", "files", "stuff", "things", "branch", "commit",
})

_PUNCTUATION_RE = re.compile(r"[^\w\s]")


def extract_keywords(message: str) -> list[str]:
    """Distinct meaningful words of ``message`` in first-seen order."""
    words = _PUNCTUATION_RE.sub(" ", message.lower()).split()
    seen: dict[str, None] = {}
    for word in words:
        if len(word) > 2 and word not in STOP_WORDS:
            seen.setdefault(word, None)
    return list(seen)


def _present(keyword: str, diff: str) -> bool:
    return re.search(rf"\b{re.escape(keyword)}\b", diff, re.IGNORECASE) is not None


class GhostCommitDetector:
    """Checks each commit message against that commit's own diff."""

    def __init__(self, sensitivity: float = ANALYSIS_DEFAULTS["ghost_sensitivity"]) -> None:
        if not 0.0 <= sensitivity <= 1.0:
            raise ConfigurationError(f"sensitivity must be within [0, 1], got {sensitivity}")
        self.sensitivity = sensitivity

    def detect(self, commit: CommitRecord) -> GhostFinding:
        if not commit.diff or not commit.diff.strip():
            return GhostFinding(
                sha=commit.sha, message=commit.message, detected=False, reason=NO_DIFF_REASON,
            )

        keywords = extract_keywords(commit.message)
        if not keywords:
            return GhostFinding(sha=commit.sha, message=commit.message, detected=False)

        missing = [k for k in keywords if not _present(k, commit.diff)]
        ratio = (len(keywords) - len(missing)) / len(keywords)
        detected = ratio < self.sensitivity
        reason = None
        if detected:
            shown = ", ".join(missing[:MAX_MISSING_KEYWORDS_REPORTED])
            reason = f"Message keywords not found in diff: {shown}"
            logger.debug("Ghost commit %s (match ratio %.2f)", commit.sha[:7], ratio)
        return GhostFinding(
            sha=commit.sha, message=commit.message, detected=detected, reason=reason,
        )

    def detect_many(self, commits: Iterable[CommitRecord]) -> list[GhostFinding]:
        return [self.detect(c) for c in commits]


def any_detected(findings: Sequence[GhostFinding]) -> bool:
    return any(f.detected for f in findings)
