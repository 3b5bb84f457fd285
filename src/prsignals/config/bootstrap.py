"""Load analysis configuration from environment variables."""

from __future__ import annotations

import json
import os
from typing import Mapping

from prsignals.models.config import AnalysisConfig

_ENV_PREFIX = "PRSIGNALS_"

_FIELD_MAP = {
    "exclude_lockfiles": "EXCLUDE_LOCKFILES",
    "exclude_non_code_assets": "EXCLUDE_NON_CODE_ASSETS",
    "exclude_tests": "EXCLUDE_TESTS",
    "exclude_configs": "EXCLUDE_CONFIGS",
    "ticket_pattern": "TICKET_PATTERN",
    "ticket_url_template": "TICKET_URL_TEMPLATE",
    "github_base_url": "GITHUB_BASE_URL",
    "ghost_sensitivity": "GHOST_SENSITIVITY",
    "title_vagueness_threshold": "TITLE_VAGUENESS_THRESHOLD",
    "provider": "PROVIDER",
    "max_tokens": "MAX_TOKENS",
    "size_warning_lines": "SIZE_WARNING_LINES",
    "size_block_lines": "SIZE_BLOCK_LINES",
    "log_level": "LOG_LEVEL",
}

# JSON list of {"pattern": ..., "tier": ..., "reason": ...} objects.
_CUSTOM_PATTERNS_ENV = "CUSTOM_RISK_PATTERNS"


def load_analysis_config(environ: Mapping[str, str] | None = None) -> AnalysisConfig:
    """Build AnalysisConfig from env vars (prefixed PRSIGNALS_) with defaults.

    Raises pydantic.ValidationError for values that fail validation, so a
    bad pattern is reported before any analysis runs.
    """
    env = os.environ if environ is None else environ
    overrides: dict[str, object] = {}
    for field_name, env_suffix in _FIELD_MAP.items():
        val = env.get(f"{_ENV_PREFIX}{env_suffix}")
        if val is not None:
            overrides[field_name] = val

    raw_patterns = env.get(f"{_ENV_PREFIX}{_CUSTOM_PATTERNS_ENV}")
    if raw_patterns:
        try:
            overrides["custom_risk_patterns"] = json.loads(raw_patterns)
        except json.JSONDecodeError as e:
            raise ValueError(
                f"{_ENV_PREFIX}{_CUSTOM_PATTERNS_ENV} is not valid JSON: {e}"
            ) from e

    return AnalysisConfig(**overrides)
