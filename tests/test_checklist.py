"""Tests for the reviewer checklist."""

from __future__ import annotations

from prsignals.analysis.checklist import format_checklist_markdown, generate_checklist
from prsignals.models.signals import ChecklistItem, RiskTier


class TestGenerateChecklist:
    def test_general_items_always_present(self) -> None:
        items = generate_checklist([])
        assert [i.category for i in items] == ["testing", "general", "general"]

    def test_database_change(self) -> None:
        items = generate_checklist(["db/migrations/001_init.sql"])
        assert items[0] == ChecklistItem("Verify migration is reversible", RiskTier.HIGH, "database")
        assert [i.category for i in items] == [
            "database", "database", "database", "testing", "general", "general",
        ]

    def test_sorted_high_first(self) -> None:
        items = generate_checklist(["src/auth/login.ts", "config/app.yaml"])
        priorities = [i.priority for i in items]
        assert priorities == sorted(priorities, reverse=True)

    def test_test_change_suppresses_testing_item(self) -> None:
        items = generate_checklist(["src/main.py", "tests/test_main.py"])
        assert "testing" not in {i.category for i in items}

    def test_security_and_frontend(self) -> None:
        categories = {i.category for i in generate_checklist(["src/auth/login.ts"])}
        assert {"security", "frontend"} <= categories

    def test_dependency_change(self) -> None:
        texts = [i.text for i in generate_checklist(["pyproject.toml"])]
        assert "Review dependency changes for vulnerabilities" in texts
        assert "Document configuration changes" in texts


class TestChecklistMarkdown:
    def test_grouped_by_category(self) -> None:
        items = [
            ChecklistItem("Verify migration is reversible", RiskTier.HIGH, "database"),
            ChecklistItem("Add tests for new functionality", RiskTier.MEDIUM, "testing"),
            ChecklistItem("Check for data integrity issues", RiskTier.MEDIUM, "database"),
        ]
        assert format_checklist_markdown(items) == (
            "### Reviewer Checklist\n"
            "\n"
            "#### Database\n"
            "- [ ] (HIGH) Verify migration is reversible\n"
            "- [ ] (MEDIUM) Check for data integrity issues\n"
            "\n"
            "#### Testing\n"
            "- [ ] (MEDIUM) Add tests for new functionality\n"
        )
