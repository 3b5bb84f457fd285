"""Signal models — risk, commit, ticket, title, size and checklist results."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class RiskTier(IntEnum):
    """Ordinal risk tier. Integer values give LOW < MEDIUM < HIGH."""

    LOW = 1
    MEDIUM = 2
    HIGH = 3


@dataclass(frozen=True)
class FileRiskAssessment:
    path: str
    tier: RiskTier
    reasons: tuple[str, ...] = ()


@dataclass(frozen=True)
class ChangeSetSummary:
    """Aggregate risk for a whole change set."""

    overall: RiskTier
    score: int  # 0-100
    high: int = 0
    medium: int = 0
    low: int = 0
    high_risk_files: tuple[str, ...] = ()

    @property
    def total(self) -> int:
        return self.high + self.medium + self.low


@dataclass(frozen=True)
class CommitRecord:
    sha: str
    message: str
    diff: str | None = None


@dataclass(frozen=True)
class GhostFinding:
    """Result of checking one commit message against its own diff."""

    sha: str
    message: str
    detected: bool
    reason: str | None = None


@dataclass(frozen=True)
class TicketRef:
    type: str  # "jira" | "github-issue" | "custom"
    id: str
    url: str


@dataclass(frozen=True)
class TitleAnalysis:
    is_vague: bool
    score: int  # 0-100
    reason: str
    suggested_title: str | None = None


@dataclass(frozen=True)
class SizeMetrics:
    files_changed: int = 0
    additions: int = 0
    deletions: int = 0
    files_added: int = 0
    files_modified: int = 0
    files_deleted: int = 0

    @property
    def total_lines(self) -> int:
        return self.additions + self.deletions


@dataclass(frozen=True)
class SizeAssessment:
    metrics: SizeMetrics
    warning_triggered: bool
    should_block: bool
    warning_threshold: int
    block_threshold: int


@dataclass(frozen=True)
class ChecklistItem:
    text: str
    priority: RiskTier
    category: str


@dataclass(frozen=True)
class RiskLabel:
    """Hosting-platform label attached to a change request for its tier."""

    name: str
    color: str
    description: str = ""

