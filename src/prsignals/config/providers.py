"""Provider budget registry.

Maps each generative-model provider to the share of its context window
that a sanitized diff may occupy.
"""

from __future__ import annotations

from typing import TypedDict


class ProviderBudget(TypedDict):
    """Diff budget for one provider."""
    name: str
    context_window: int
    diff_token_budget: int


PROVIDER_REGISTRY: dict[str, ProviderBudget] = {
    "gemini": {
        "name": "Google Gemini",
        "context_window": 1_000_000,
        "diff_token_budget": 800_000,
    },
    "anthropic": {
        "name": "Anthropic",
        "context_window": 200_000,
        "diff_token_budget": 150_000,
    },
    "openai": {
        "name": "OpenAI",
        "context_window": 128_000,
        "diff_token_budget": 100_000,
    },
}

# Budget used for providers missing from the registry.
FALLBACK_TOKEN_BUDGET = 100_000


def get_token_budget(provider: str) -> int:
    """Return the diff token budget for ``provider`` (case-insensitive)."""
    entry = PROVIDER_REGISTRY.get(provider.strip().lower())
    return entry["diff_token_budget"] if entry else FALLBACK_TOKEN_BUDGET


def list_providers() -> list[dict]:
    """Return a flat list of known providers with their budgets."""
    return [
        {"id": key, **value}
        for key, value in PROVIDER_REGISTRY.items()
    ]
