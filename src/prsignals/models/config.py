"""Configuration models."""

from __future__ import annotations

import re

from pydantic import BaseModel, Field, field_validator

from prsignals.config.defaults import ANALYSIS_DEFAULTS
from prsignals.models.signals import RiskTier


def _check_pattern(value: str) -> str:
    try:
        re.compile(value)
    except re.error as e:
        raise ValueError(f"invalid regular expression {value!r}: {e}") from e
    return value


class CustomRiskPattern(BaseModel):
    """A caller-supplied path pattern assigned to one risk tier."""

    pattern: str = Field(..., min_length=1)
    tier: RiskTier
    reason: str = Field(default="Custom pattern")

    @field_validator("tier", mode="before")
    @classmethod
    def parse_tier(cls, v: object) -> object:
        if isinstance(v, str):
            try:
                return RiskTier[v.strip().upper()]
            except KeyError:
                raise ValueError("tier must be one of: HIGH, MEDIUM, LOW") from None
        return v

    @field_validator("pattern")
    @classmethod
    def validate_pattern(cls, v: str) -> str:
        return _check_pattern(v)


class AnalysisConfig(BaseModel):
    """Options for one analysis run.

    Every field is optional; defaults come from ``ANALYSIS_DEFAULTS``.
    """

    # Sanitizer toggles
    exclude_lockfiles: bool = Field(default=ANALYSIS_DEFAULTS["exclude_lockfiles"])
    exclude_non_code_assets: bool = Field(
        default=ANALYSIS_DEFAULTS["exclude_non_code_assets"]
    )
    exclude_tests: bool = Field(default=ANALYSIS_DEFAULTS["exclude_tests"])
    exclude_configs: bool = Field(default=ANALYSIS_DEFAULTS["exclude_configs"])

    custom_risk_patterns: list[CustomRiskPattern] = Field(default_factory=list)

    # Ticket detection
    ticket_pattern: str | None = Field(
        default=None,
        description="Replaces the built-in JIRA/GitHub patterns when set.",
    )
    ticket_url_template: str | None = Field(
        default=None,
        description="URL template with an {{id}} placeholder.",
    )
    github_base_url: str | None = Field(
        default=None,
        description="Repository URL used to link #N issue references.",
    )

    ghost_sensitivity: float = Field(
        default=ANALYSIS_DEFAULTS["ghost_sensitivity"], ge=0.0, le=1.0,
    )
    title_vagueness_threshold: int = Field(
        default=ANALYSIS_DEFAULTS["title_vagueness_threshold"], ge=0, le=100,
    )

    # Token budget
    provider: str = Field(default=ANALYSIS_DEFAULTS["provider"])
    max_tokens: int | None = Field(
        default=None, ge=0,
        description="Explicit diff token budget. Overrides the provider budget.",
    )

    # Size thresholds in changed lines; 0 disables the check.
    size_warning_lines: int = Field(default=ANALYSIS_DEFAULTS["size_warning_lines"], ge=0)
    size_block_lines: int = Field(default=ANALYSIS_DEFAULTS["size_block_lines"], ge=0)

    log_level: str = Field(default="INFO")

    @field_validator("ticket_pattern", mode="before")
    @classmethod
    def validate_ticket_pattern(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        if not v:
            return None
        return _check_pattern(v)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v = v.strip().upper()
        if v not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {v}")
        return v
