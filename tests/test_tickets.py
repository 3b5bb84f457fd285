"""Tests for ticket reference detection."""

from __future__ import annotations

import pytest

from prsignals.analysis.tickets import (
    CUSTOM,
    GITHUB_ISSUE,
    JIRA,
    NO_TICKETS_MARKDOWN,
    TicketDetector,
    detect_tickets,
    detect_tickets_from_sources,
    format_tickets_markdown,
)
from prsignals.errors import ConfigurationError
from prsignals.models.config import AnalysisConfig
from prsignals.models.signals import TicketRef


# ---------------------------------------------------------------------------
# Built-in patterns
# ---------------------------------------------------------------------------


class TestDefaultPatterns:
    def test_jira_deduplicated(self) -> None:
        assert detect_tickets("Fixes PROJ-123 and also PROJ-123") == [
            TicketRef(JIRA, "PROJ-123", "#"),
        ]

    def test_jira_url_template(self) -> None:
        (ticket,) = detect_tickets("PROJ-9", url_template="https://jira.example.com/browse/{{id}}")
        assert ticket.url == "https://jira.example.com/browse/PROJ-9"

    def test_github_default_base(self) -> None:
        assert detect_tickets("closes #42") == [
            TicketRef(GITHUB_ISSUE, "#42", "https://github.com/issues/42"),
        ]

    def test_github_repository_base(self) -> None:
        (ticket,) = detect_tickets("closes #42", github_base_url="https://github.com/acme/shop/")
        assert ticket.url == "https://github.com/acme/shop/issues/42"

    def test_jira_before_github_within_text(self) -> None:
        tickets = detect_tickets("#7 relates to PROJ-1")
        assert [t.id for t in tickets] == ["PROJ-1", "#7"]

    @pytest.mark.parametrize("text", [
        "",
        "no references here",
        "proj-123 lowercase",
        "issue #1234567 too long",
        "A-1 single letter key",
    ])
    def test_no_match(self, text: str) -> None:
        assert detect_tickets(text) == []

    def test_alphanumeric_project_key(self) -> None:
        assert [t.id for t in detect_tickets("see AB2-77")] == ["AB2-77"]


# ---------------------------------------------------------------------------
# Custom pattern
# ---------------------------------------------------------------------------


class TestCustomPattern:
    def test_capture_group_used_as_id(self) -> None:
        tickets = detect_tickets(
            "see TICKET-9", pattern=r"TICKET-(\d+)", url_template="https://t.example/{{id}}",
        )
        assert tickets == [TicketRef(CUSTOM, "9", "https://t.example/9")]

    def test_whole_match_without_group(self) -> None:
        assert detect_tickets("ENG42 and PROJ-1", pattern=r"ENG\d+") == [
            TicketRef(CUSTOM, "ENG42", "#"),
        ]

    def test_custom_replaces_defaults(self) -> None:
        assert detect_tickets("PROJ-1 #2", pattern=r"ENG\d+") == []

    def test_blank_pattern_uses_defaults(self) -> None:
        assert [t.id for t in detect_tickets("PROJ-1", pattern="   ")] == ["PROJ-1"]

    def test_invalid_pattern_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="invalid ticket pattern"):
            TicketDetector(pattern="(")

    def test_from_config(self) -> None:
        config = AnalysisConfig(
            ticket_pattern=r"ENG-(\d+)",
            ticket_url_template="https://linear.example/ENG-{{id}}",
        )
        tickets = TicketDetector.from_config(config).detect("ENG-5")
        assert tickets == [TicketRef(CUSTOM, "5", "https://linear.example/ENG-5")]


# ---------------------------------------------------------------------------
# Multiple sources
# ---------------------------------------------------------------------------


class TestSources:
    def test_deduplicated_across_sources(self) -> None:
        tickets = detect_tickets_from_sources(
            "PROJ-1 login",
            "Closes #7 and PROJ-1",
            ["PROJ-2 tidy", "PROJ-1 again"],
        )
        assert [t.id for t in tickets] == ["PROJ-1", "#7", "PROJ-2"]

    def test_missing_sources_ignored(self) -> None:
        assert detect_tickets_from_sources(None, None, []) == []

    def test_first_occurrence_wins(self) -> None:
        tickets = detect_tickets_from_sources(
            "PROJ-1", None, ["PROJ-1"], url_template="https://jira/{{id}}",
        )
        assert tickets == [TicketRef(JIRA, "PROJ-1", "https://jira/PROJ-1")]


# ---------------------------------------------------------------------------
# Markdown
# ---------------------------------------------------------------------------


class TestMarkdown:
    def test_empty(self) -> None:
        assert format_tickets_markdown([]) == NO_TICKETS_MARKDOWN == "No related tickets found."

    def test_lines(self) -> None:
        tickets = [
            TicketRef(JIRA, "PROJ-1", "#"),
            TicketRef(GITHUB_ISSUE, "#7", "https://github.com/issues/7"),
            TicketRef(CUSTOM, "9", "https://t.example/9"),
        ]
        assert format_tickets_markdown(tickets) == (
            "- [PROJ-1](#) (JIRA)\n"
            "- [#7](https://github.com/issues/7) (GitHub)\n"
            "- [9](https://t.example/9) (Custom)"
        )
