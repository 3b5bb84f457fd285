"""Change-set report — runs every analysis over one change request.

Flow:
  1. parse_diff(diff) -> files
  2. sanitize(files) -> relevant files
  3. truncate(relevant, budget) -> kept files, reconstruct -> processed diff
  4. RiskClassifier.summarize(kept paths)
  5. size metrics over all parsed files
  6. ghost commits over the most recent commits with their own diffs
  7. title vagueness over the processed diff and kept paths
  8. tickets over title, body and commit messages
  9. reviewer checklist over kept paths
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from prsignals.analysis.checklist import format_checklist_markdown, generate_checklist
from prsignals.analysis.diff_parser import parse_diff
from prsignals.analysis.ghost import GhostCommitDetector, any_detected
from prsignals.analysis.paths import PathClassifier
from prsignals.analysis.risk import RiskClassifier, risk_label
from prsignals.analysis.sanitizer import SanitizeOptions, reconstruct, sanitize
from prsignals.analysis.size import assess_size, calculate_size, format_size_markdown, size_warning_message
from prsignals.analysis.tickets import TicketDetector, format_tickets_markdown
from prsignals.analysis.title import TitleVaguenessAnalyzer
from prsignals.analysis.truncation import TokenBudgetTruncator, total_tokens
from prsignals.config.defaults import MAX_COMMITS_ANALYZED
from prsignals.config.providers import get_token_budget
from prsignals.models.config import AnalysisConfig
from prsignals.models.diff import FileChange
from prsignals.models.signals import (
    ChangeSetSummary,
    ChecklistItem,
    CommitRecord,
    GhostFinding,
    SizeAssessment,
    TicketRef,
    TitleAnalysis,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChangeSetReport:
    parsed_file_count: int
    files: tuple[FileChange, ...]
    processed_diff: str
    tokens: int
    token_budget: int
    summary: ChangeSetSummary
    size: SizeAssessment
    ghost_findings: tuple[GhostFinding, ...]
    title: TitleAnalysis | None
    tickets: tuple[TicketRef, ...]
    checklist: tuple[ChecklistItem, ...] = field(default_factory=tuple)

    @property
    def changed_files(self) -> list[str]:
        return [f.new_path for f in self.files]

    @property
    def has_ghost_commits(self) -> bool:
        return any_detected(self.ghost_findings)

    @property
    def tickets_markdown(self) -> str:
        return format_tickets_markdown(self.tickets)

    def to_dict(self) -> dict:
        """JSON-serialisable view, without the processed diff body."""
        label = risk_label(self.summary.overall)
        return {
            "files": {
                "parsed": self.parsed_file_count,
                "kept": self.changed_files,
                "tokens": self.tokens,
                "token_budget": self.token_budget,
            },
            "risk": {
                "level": self.summary.overall.name,
                "score": self.summary.score,
                "breakdown": {
                    "high": self.summary.high,
                    "medium": self.summary.medium,
                    "low": self.summary.low,
                },
                "high_risk_files": list(self.summary.high_risk_files),
                "label": label.name,
            },
            "size": {
                "files_changed": self.size.metrics.files_changed,
                "additions": self.size.metrics.additions,
                "deletions": self.size.metrics.deletions,
                "total_lines": self.size.metrics.total_lines,
                "warning_triggered": self.size.warning_triggered,
                "should_block": self.size.should_block,
            },
            "ghost_commits": [
                {"sha": g.sha, "message": g.message, "detected": g.detected, "reason": g.reason}
                for g in self.ghost_findings
            ],
            "has_ghost_commits": self.has_ghost_commits,
            "title": None if self.title is None else {
                "is_vague": self.title.is_vague,
                "score": self.title.score,
                "reason": self.title.reason,
                "suggested_title": self.title.suggested_title,
            },
            "tickets": [{"type": t.type, "id": t.id, "url": t.url} for t in self.tickets],
            "checklist": [
                {"text": i.text, "priority": i.priority.name, "category": i.category}
                for i in self.checklist
            ],
        }


def resolve_token_budget(config: AnalysisConfig) -> int:
    if config.max_tokens is not None:
        return config.max_tokens
    return get_token_budget(config.provider)


def build_report(
    diff: str,
    *,
    title: str | None = None,
    body: str | None = None,
    commits: Sequence[CommitRecord] = (),
    config: AnalysisConfig | None = None,
) -> ChangeSetReport:
    """Run the full analysis. ``title=None`` skips the title check."""
    config = config or AnalysisConfig()
    classifier = PathClassifier.from_config(config)
    risk = RiskClassifier(classifier)

    parsed = parse_diff(diff)
    if not parsed:
        logger.warning("No file changes found in diff")
    relevant = sanitize(parsed, SanitizeOptions.from_config(config), classifier)

    budget = resolve_token_budget(config)
    kept = TokenBudgetTruncator(risk).truncate(relevant, budget)
    processed_diff = reconstruct(kept)
    tokens = total_tokens(kept)
    logger.info("Processed %d/%d files (%d tokens)", len(kept), len(parsed), tokens)

    paths = [f.new_path for f in kept]
    summary = risk.summarize(paths)

    size = assess_size(calculate_size(parsed), config.size_warning_lines, config.size_block_lines)
    warning = size_warning_message(size)
    if warning:
        logger.warning(warning)

    recent = list(commits)[-MAX_COMMITS_ANALYZED:]
    ghost = GhostCommitDetector(config.ghost_sensitivity).detect_many(recent)
    if any_detected(ghost):
        logger.info("Potential ghost commits: %d", sum(1 for g in ghost if g.detected))

    title_analysis = None
    if title is not None:
        title_analysis = TitleVaguenessAnalyzer(config.title_vagueness_threshold).analyze(
            title, processed_diff, paths,
        )

    tickets = TicketDetector.from_config(config).detect_from_sources(
        title, body, [c.message for c in commits],
    )
    logger.info("Found %d related ticket(s)", len(tickets))

    return ChangeSetReport(
        parsed_file_count=len(parsed),
        files=tuple(kept),
        processed_diff=processed_diff,
        tokens=tokens,
        token_budget=budget,
        summary=summary,
        size=size,
        ghost_findings=tuple(ghost),
        title=title_analysis,
        tickets=tuple(tickets),
        checklist=tuple(generate_checklist(paths)),
    )


def format_ghost_commits_markdown(findings: Sequence[GhostFinding]) -> str:
    """Markdown section listing detected ghost commits, or "" if none."""
    detected = [f for f in findings if f.detected]
    if not detected:
        return ""
    lines = ["### Potential Ghost Commits"]
    lines.extend(f"- **{f.sha[:7]}**: {f.reason or 'Message mismatch'}" for f in detected)
    return "\n".join(lines)


def format_report_markdown(report: ChangeSetReport) -> str:
    summary = report.summary
    sections = [
        f"**Risk Level:** {summary.overall.name} ({summary.score}/100)",
        f"**Size:** {format_size_markdown(report.size.metrics)}",
    ]
    if summary.high_risk_files:
        sections.append(
            "**High-risk files:** " + ", ".join(f"`{p}`" for p in summary.high_risk_files)
        )
    sections.append("### Related Tickets\n" + report.tickets_markdown)
    sections.append(format_checklist_markdown(report.checklist).rstrip())
    ghosts = format_ghost_commits_markdown(report.ghost_findings)
    if ghosts:
        sections.append(ghosts)
    return "\n\n".join(sections) + "\n"
