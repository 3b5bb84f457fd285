"""Tests for AnalysisConfig validation, env bootstrap and provider budgets."""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from prsignals.config.bootstrap import load_analysis_config
from prsignals.config.providers import FALLBACK_TOKEN_BUDGET, get_token_budget, list_providers
from prsignals.models.config import AnalysisConfig, CustomRiskPattern
from prsignals.models.signals import RiskTier
from prsignals.report import resolve_token_budget


# ---------------------------------------------------------------------------
# AnalysisConfig
# ---------------------------------------------------------------------------


class TestAnalysisConfig:
    def test_defaults(self) -> None:
        config = AnalysisConfig()
        assert config.exclude_lockfiles is True
        assert config.exclude_non_code_assets is True
        assert config.exclude_tests is False
        assert config.exclude_configs is False
        assert config.ghost_sensitivity == 0.3
        assert config.title_vagueness_threshold == 70
        assert config.provider == "openai"
        assert config.max_tokens is None
        assert config.custom_risk_patterns == []
        assert config.log_level == "INFO"

    @pytest.mark.parametrize("field,value", [
        ("ghost_sensitivity", 1.5),
        ("ghost_sensitivity", -0.1),
        ("title_vagueness_threshold", 101),
        ("max_tokens", -1),
        ("size_warning_lines", -5),
        ("log_level", "verbose"),
        ("ticket_pattern", "("),
    ])
    def test_invalid_values(self, field: str, value: object) -> None:
        with pytest.raises(ValidationError):
            AnalysisConfig(**{field: value})

    def test_blank_ticket_pattern_is_none(self) -> None:
        assert AnalysisConfig(ticket_pattern="   ").ticket_pattern is None

    def test_log_level_normalised(self) -> None:
        assert AnalysisConfig(log_level=" debug ").log_level == "DEBUG"


class TestCustomRiskPattern:
    @pytest.mark.parametrize("tier", ["high", "HIGH", " High ", RiskTier.HIGH, 3])
    def test_tier_forms(self, tier: object) -> None:
        assert CustomRiskPattern(pattern="billing", tier=tier).tier is RiskTier.HIGH

    def test_default_reason(self) -> None:
        assert CustomRiskPattern(pattern="billing", tier="low").reason == "Custom pattern"

    @pytest.mark.parametrize("data", [
        {"pattern": "billing", "tier": "CRITICAL"},
        {"pattern": "", "tier": "HIGH"},
        {"pattern": "[unclosed", "tier": "HIGH"},
    ])
    def test_invalid(self, data: dict) -> None:
        with pytest.raises(ValidationError):
            CustomRiskPattern(**data)


# ---------------------------------------------------------------------------
# Environment bootstrap
# ---------------------------------------------------------------------------


class TestLoadAnalysisConfig:
    def test_empty_environment(self) -> None:
        assert load_analysis_config({}) == AnalysisConfig()

    def test_overrides(self) -> None:
        env = {
            "PRSIGNALS_EXCLUDE_TESTS": "true",
            "PRSIGNALS_EXCLUDE_LOCKFILES": "false",
            "PRSIGNALS_GHOST_SENSITIVITY": "0.5",
            "PRSIGNALS_MAX_TOKENS": "500",
            "PRSIGNALS_PROVIDER": "gemini",
            "PRSIGNALS_TICKET_URL_TEMPLATE": "https://jira.example.com/browse/{{id}}",
            "PRSIGNALS_CUSTOM_RISK_PATTERNS": json.dumps(
                [{"pattern": "billing", "tier": "HIGH", "reason": "Money"}]
            ),
        }
        config = load_analysis_config(env)
        assert config.exclude_tests is True
        assert config.exclude_lockfiles is False
        assert config.ghost_sensitivity == 0.5
        assert config.max_tokens == 500
        assert config.provider == "gemini"
        assert config.ticket_url_template == "https://jira.example.com/browse/{{id}}"
        assert config.custom_risk_patterns == [
            CustomRiskPattern(pattern="billing", tier=RiskTier.HIGH, reason="Money"),
        ]

    def test_unrelated_variables_ignored(self) -> None:
        assert load_analysis_config({"GHOST_SENSITIVITY": "0.9"}).ghost_sensitivity == 0.3

    def test_invalid_custom_patterns_json(self) -> None:
        with pytest.raises(ValueError, match="not valid JSON"):
            load_analysis_config({"PRSIGNALS_CUSTOM_RISK_PATTERNS": "[{"})

    def test_invalid_value_reported(self) -> None:
        with pytest.raises(ValidationError):
            load_analysis_config({"PRSIGNALS_TICKET_PATTERN": "("})

    def test_reads_process_environment(
        self, clean_env: None, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setenv("PRSIGNALS_TITLE_VAGUENESS_THRESHOLD", "60")
        assert load_analysis_config().title_vagueness_threshold == 60


# ---------------------------------------------------------------------------
# Provider budgets
# ---------------------------------------------------------------------------


class TestProviderBudgets:
    @pytest.mark.parametrize("provider,expected", [
        ("gemini", 800_000),
        ("Gemini", 800_000),
        ("anthropic", 150_000),
        ("openai", 100_000),
        ("mistral", FALLBACK_TOKEN_BUDGET),
    ])
    def test_get_token_budget(self, provider: str, expected: int) -> None:
        assert get_token_budget(provider) == expected

    def test_list_providers(self) -> None:
        assert [p["id"] for p in list_providers()] == ["gemini", "anthropic", "openai"]

    def test_explicit_max_tokens_wins(self) -> None:
        assert resolve_token_budget(AnalysisConfig(provider="gemini", max_tokens=10)) == 10
        assert resolve_token_budget(AnalysisConfig(provider="anthropic")) == 150_000
