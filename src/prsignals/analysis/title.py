"""Title vagueness analyzer — scores change-request titles and suggests better ones.

Scoring sums the points of every vagueness pattern that matches (each
description counted once), adds penalties for a missing ticket reference
and for stacked generic verbs, and caps the total at 100. A suggestion is
only built for vague titles, from the changed paths and the added lines.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Sequence

from prsignals.analysis.paths import base_name
from prsignals.config.defaults import ANALYSIS_DEFAULTS, MAX_TITLE_LENGTH
from prsignals.models.signals import TitleAnalysis

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VaguenessPattern:
    pattern: re.Pattern[str]
    points: int
    description: str


def _pattern(regex: str, points: int, description: str) -> VaguenessPattern:
    return VaguenessPattern(re.compile(regex, re.IGNORECASE), points, description)


DEFAULT_VAGUE_PATTERNS: tuple[VaguenessPattern, ...] = (
    _pattern(r"^(?:update|fix|wip|changes|modified|refactor|clean)$", 30,
             "Generic action verb without context"),
    _pattern(r"^(?:auth|config|stuff|things|main|test|api|ui|css|bug)$", 35,
             "Single generic word without details"),
    _pattern(r"^.{1,14}$", 30, "Very short title (< 15 chars)"),
    _pattern(r"^\s*$", 100, "Empty or whitespace-only title"),
    _pattern(r"^(?:.*\s)?(?:fix|update|change|add|remove)\s*(?:it|this|that|stuff|things|code)$", 40,
             "Generic action + generic noun"),
    _pattern(r"\b(?:tmp|temp|temporary|wip|draft)\b", 25,
             "Contains temporary/WIP indicators"),
)

NO_TICKET_POINTS = 15
MULTIPLE_VERBS_POINTS = 10

_TICKET_RE = re.compile(r"[A-Z]+-\d+|#\d+")
_GENERIC_VERB_RE = re.compile(
    r"\b(?:fix|update|change|add|remove|implement|create|delete|modify)\b", re.IGNORECASE
)

# Directory names that say nothing about the change.
_SCAFFOLD_DIRS = frozenset({"src", "lib", "dist", "build", "public", "assets", "app", "pkg"})
_MAX_CONTEXT_FILES = 5
_MAX_CONTEXT_TOKENS = 3
_MAX_KEY_CHANGES = 2

_DECLARATION_RE = re.compile(
    r"^\+[ \t]*(?:export[ \t]+(?:default[ \t]+)?)?(?:async[ \t]+)?"
    r"(?:function|class|const|def|func|fn|interface|struct|type)[ \t]+([A-Za-z_]\w*)",
    re.MULTILINE,
)
_SUBSTANTIAL_ADD_RE = re.compile(r"^\+(?!\+\+ ).{10,}", re.MULTILINE)
_MANY_ADDED_LINES = 5

_VERB_GROUPS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("fix", "bug", "repair", "correct", "resolve"), "Fix"),
    (("add", "create", "implement", "introduce", "new"), "Add"),
    (("update", "upgrade", "change", "modify", "refactor"), "Update"),
    (("remove", "delete", "clean", "drop", "eliminate"), "Remove"),
    (("test", "spec", "coverage"), "Test"),
    (("doc", "readme", "comment", "guide"), "Document"),
)


def score_title(
    title: str,
    patterns: Sequence[VaguenessPattern] = DEFAULT_VAGUE_PATTERNS,
) -> tuple[int, list[str]]:
    """Return the capped vagueness score and the reasons that contributed."""
    subject = title.strip()
    score = 0
    reasons: list[str] = []
    for entry in patterns:
        if entry.description in reasons:
            continue
        if entry.pattern.search(subject):
            score += entry.points
            reasons.append(entry.description)

    if not _TICKET_RE.search(title):
        score += NO_TICKET_POINTS
        reasons.append("No ticket reference (JIRA/GitHub issue)")

    if len(_GENERIC_VERB_RE.findall(title)) > 1:
        score += MULTIPLE_VERBS_POINTS
        reasons.append("Multiple generic action words")

    return min(score, 100), reasons


def extract_file_contexts(files: Sequence[str]) -> list[str]:
    """Up to three descriptive directory or file-name tokens."""
    contexts: dict[str, None] = {}
    for path in files[:_MAX_CONTEXT_FILES]:
        parts = [p for p in path.split("/") if p]
        for part in parts[:-1]:
            if part not in _SCAFFOLD_DIRS and "." not in part and len(part) > 3:
                contexts.setdefault(part, None)
        if parts:
            stem = parts[-1].split(".")[0]
            if len(stem) > 3 and stem not in _SCAFFOLD_DIRS:
                contexts.setdefault(stem, None)
    return list(contexts)[:_MAX_CONTEXT_TOKENS]


def extract_key_changes(diff: str) -> list[str]:
    """Up to two hints: names of newly declared symbols, else a bulk marker."""
    changes: list[str] = []
    for name in _DECLARATION_RE.findall(diff):
        if len(name) > 2 and name not in changes:
            changes.append(name)
        if len(changes) == _MAX_KEY_CHANGES:
            return changes
    if len(_SUBSTANTIAL_ADD_RE.findall(diff)) > _MANY_ADDED_LINES:
        changes.append("multiple components")
    return changes[:_MAX_KEY_CHANGES]


def infer_action(title: str, key_changes: Sequence[str]) -> str:
    lowered = title.lower()
    for words, action in _VERB_GROUPS:
        if any(w in lowered for w in words):
            return action
    return "Update" if key_changes else "Modify"


def fallback_title(title: str, files: Sequence[str]) -> str:
    if len(files) == 1:
        stem = re.sub(r"\.\w+$", "", base_name(files[0]))
        return f"Update {stem or 'files'}"
    if len(files) > 1:
        parts = files[0].split("/")
        directory = parts[-2] if len(parts) > 1 else ""
        return f"Update {len(files)} files in {directory or 'repository'}"
    return f"Update: {title.strip()}".rstrip()


def suggest_title(title: str, diff: str, files: Sequence[str]) -> str:
    contexts = extract_file_contexts(files)
    key_changes = extract_key_changes(diff)
    if not contexts and not key_changes:
        return fallback_title(title, files)

    components = [infer_action(title, key_changes), " ".join(contexts)]
    if key_changes:
        components.append(key_changes[0])
    improved = re.sub(r"\s+", " ", " ".join(components)).strip()
    improved = improved[:1].upper() + improved[1:]
    if len(improved) > MAX_TITLE_LENGTH:
        improved = improved[: MAX_TITLE_LENGTH - 3] + "..."
    return improved


class TitleVaguenessAnalyzer:
    """Scores a title against the vagueness patterns and a fixed threshold."""

    def __init__(
        self,
        threshold: int = ANALYSIS_DEFAULTS["title_vagueness_threshold"],
        patterns: Sequence[VaguenessPattern] = DEFAULT_VAGUE_PATTERNS,
    ) -> None:
        self.threshold = threshold
        self.patterns = tuple(patterns)

    def analyze(self, title: str, diff: str = "", files: Sequence[str] = ()) -> TitleAnalysis:
        score, reasons = score_title(title, self.patterns)
        if score < self.threshold:
            return TitleAnalysis(
                is_vague=False,
                score=score,
                reason="; ".join(reasons) or "Title is descriptive enough",
            )

        suggestion = suggest_title(title, diff, list(files))
        logger.debug("Vague title %r (score %d) -> %r", title, score, suggestion)
        return TitleAnalysis(
            is_vague=True,
            score=score,
            reason="; ".join(reasons),
            suggested_title=suggestion,
        )


def analyze_title(title: str, diff: str = "", files: Sequence[str] = ()) -> TitleAnalysis:
    """One-off analysis with the default threshold and patterns."""
    return TitleVaguenessAnalyzer().analyze(title, diff, files)
