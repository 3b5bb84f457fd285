"""Reviewer checklist derived from the changed paths."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Sequence

from prsignals.models.signals import ChecklistItem, RiskTier

H, M, L = RiskTier.HIGH, RiskTier.MEDIUM, RiskTier.LOW


@dataclass(frozen=True)
class _Area:
    category: str
    pattern: re.Pattern[str]
    items: tuple[tuple[str, RiskTier], ...]


def _area(category: str, regex: str, *items: tuple[str, RiskTier]) -> _Area:
    return _Area(category, re.compile(regex, re.IGNORECASE), items)


_AREAS: tuple[_Area, ...] = (
    _area("database", r"\.sql$|migration|seeder|schema|database",
          ("Verify migration is reversible", H),
          ("Ensure database backup before deployment", H),
          ("Check for data integrity issues", M)),
    _area("security", r"auth|login|logout|session|jwt|oauth|password|credential|permission|role|access|token",
          ("Test authentication flow end-to-end", H),
          ("Verify authorization checks in all scenarios", H),
          ("Check for session management issues", M),
          ("Verify token refresh flow", M)),
    _area("api", r"controller|route|endpoint|handler|api|service|middleware",
          ("Update API documentation", H),
          ("Verify response format and status codes", H),
          ("Test error handling scenarios", M),
          ("Check rate limiting if applicable", L)),
    _area("configuration", r"\.json$|\.ya?ml$|\.toml$|config|settings",
          ("Verify configuration changes in staging", M),
          ("Document configuration changes", L)),
    _area("dependencies", r"package\.json|package-lock|bun\.lock|requirements|pyproject\.toml|gemfile|cargo\.toml",
          ("Review dependency changes for vulnerabilities", H),
          ("Verify compatibility with existing code", M),
          ("Update lockfile in commit", L)),
    _area("security", r"security|crypto|encrypt|decrypt",
          ("Security audit by team lead", H),
          ("Verify encryption keys are not hardcoded", H)),
    _area("frontend", r"\.[jt]sx?$|\.vue$|\.svelte$",
          ("Verify UI changes in browser", M),
          ("Check for accessibility issues", L),
          ("Verify responsive behavior", L)),
)

_TEST_RE = re.compile(r"\.(?:test|spec)\.|__tests__|(?:^|/)tests?/|test_[^/]*\.py$|_test\.(?:py|go)$", re.IGNORECASE)

_GENERAL_ITEMS: tuple[tuple[str, RiskTier], ...] = (
    ("Code follows project style guidelines", L),
    ("No debug or print statements left", L),
)


def generate_checklist(paths: Sequence[str]) -> list[ChecklistItem]:
    """Checklist items for the areas touched, HIGH priority first."""
    items: list[ChecklistItem] = []
    for area in _AREAS:
        if any(area.pattern.search(p) for p in paths):
            items.extend(ChecklistItem(text, prio, area.category) for text, prio in area.items)
    if not any(_TEST_RE.search(p) for p in paths):
        items.append(ChecklistItem("Add tests for new functionality", M, "testing"))
    items.extend(ChecklistItem(text, prio, "general") for text, prio in _GENERAL_ITEMS)
    # Stable: items keep declaration order within (priority, category).
    return sorted(items, key=lambda i: (-i.priority, i.category))


def format_checklist_markdown(items: Sequence[ChecklistItem]) -> str:
    """Group items by category, categories in first-seen order."""
    by_category: dict[str, list[ChecklistItem]] = {}
    for item in items:
        by_category.setdefault(item.category, []).append(item)

    parts = ["### Reviewer Checklist", ""]
    for category, group in by_category.items():
        parts.append(f"#### {category.capitalize()}")
        parts.extend(f"- [ ] ({item.priority.name}) {item.text}" for item in group)
        parts.append("")
    return "\n".join(parts)
