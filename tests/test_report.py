"""Tests for the end-to-end change-set report."""

from __future__ import annotations

import json

import pytest

from prsignals.models.config import AnalysisConfig
from prsignals.models.signals import CommitRecord, RiskTier, TicketRef
from prsignals.report import (
    ChangeSetReport,
    build_report,
    format_ghost_commits_markdown,
    format_report_markdown,
)


@pytest.fixture
def report(sample_diff: str, sample_commits: list[CommitRecord]) -> ChangeSetReport:
    return build_report(
        sample_diff,
        title="update",
        body="Refs PROJ-7",
        commits=sample_commits,
    )


# ---------------------------------------------------------------------------
# build_report
# ---------------------------------------------------------------------------


class TestBuildReport:
    def test_sanitized_and_ordered(self, report: ChangeSetReport) -> None:
        assert report.parsed_file_count == 4
        assert report.changed_files == ["src/auth/login.ts", "src/utils/helpers.ts"]
        assert report.token_budget == 100_000
        assert "package-lock.json" not in report.processed_diff

    def test_risk(self, report: ChangeSetReport) -> None:
        assert report.summary.overall is RiskTier.HIGH
        assert report.summary.score == 75
        assert report.summary.high_risk_files == ("src/auth/login.ts",)

    def test_size_counts_every_parsed_file(self, report: ChangeSetReport) -> None:
        assert report.size.metrics.files_changed == 4
        assert report.size.metrics.total_lines == 9
        assert not report.size.warning_triggered

    def test_ghost_commits(self, report: ChangeSetReport) -> None:
        assert [g.detected for g in report.ghost_findings] == [False, True]
        assert report.has_ghost_commits

    def test_title(self, report: ChangeSetReport) -> None:
        assert report.title is not None
        assert report.title.is_vague is True
        assert report.title.suggested_title == "Update auth login utils login"

    def test_tickets_deduplicated(self, report: ChangeSetReport) -> None:
        assert report.tickets == (TicketRef("jira", "PROJ-7", "#"),)
        assert report.tickets_markdown == "- [PROJ-7](#) (JIRA)"

    def test_checklist(self, report: ChangeSetReport) -> None:
        categories = {i.category for i in report.checklist}
        assert {"security", "frontend", "testing", "general"} <= categories

    def test_title_skipped_when_absent(self, sample_diff: str) -> None:
        assert build_report(sample_diff).title is None

    def test_empty_diff(self) -> None:
        result = build_report("")
        assert result.parsed_file_count == 0
        assert result.files == ()
        assert result.processed_diff == ""
        assert (result.summary.overall, result.summary.score) == (RiskTier.LOW, 0)

    def test_zero_budget(self, sample_diff: str) -> None:
        result = build_report(sample_diff, config=AnalysisConfig(max_tokens=0))
        assert result.files == ()
        assert result.tokens == 0
        assert result.summary.score == 0

    def test_provider_budget(self, sample_diff: str) -> None:
        result = build_report(sample_diff, config=AnalysisConfig(provider="gemini"))
        assert result.token_budget == 800_000

    def test_only_recent_commits_checked(self, sample_diff: str) -> None:
        commits = [CommitRecord(sha=f"{i:040d}", message=f"commit {i}") for i in range(25)]
        result = build_report(sample_diff, commits=commits)
        assert len(result.ghost_findings) == 20
        assert result.ghost_findings[0].sha == f"{5:040d}"

    def test_size_warning_config(self, sample_diff: str) -> None:
        result = build_report(sample_diff, config=AnalysisConfig(size_warning_lines=5))
        assert result.size.warning_triggered is True
        assert result.size.should_block is False


# ---------------------------------------------------------------------------
# Serialisation and markdown
# ---------------------------------------------------------------------------


class TestRendering:
    def test_to_dict_is_json_serialisable(self, report: ChangeSetReport) -> None:
        data = json.loads(json.dumps(report.to_dict()))
        assert data["risk"]["level"] == "HIGH"
        assert data["risk"]["label"] == "prsignals/high-risk"
        assert data["risk"]["breakdown"] == {"high": 1, "medium": 1, "low": 0}
        assert data["files"]["kept"] == ["src/auth/login.ts", "src/utils/helpers.ts"]
        assert data["title"]["is_vague"] is True
        assert data["has_ghost_commits"] is True

    def test_markdown(self, report: ChangeSetReport) -> None:
        text = format_report_markdown(report)
        assert text.startswith("**Risk Level:** HIGH (75/100)\n\n")
        assert "**Size:** 9 lines changed (7 additions, 2 deletions) across 4 files" in text
        assert "**High-risk files:** `src/auth/login.ts`" in text
        assert "### Related Tickets\n- [PROJ-7](#) (JIRA)" in text
        assert "### Reviewer Checklist" in text
        assert text.endswith(
            "### Potential Ghost Commits\n"
            "- **bbbbbbb**: Message keywords not found in diff: rework, payment, gateway\n"
        )

    def test_markdown_without_tickets(self) -> None:
        text = format_report_markdown(build_report(""))
        assert "### Related Tickets\nNo related tickets found." in text
        assert "Potential Ghost Commits" not in text

    def test_ghost_markdown_empty(self) -> None:
        assert format_ghost_commits_markdown([]) == ""
