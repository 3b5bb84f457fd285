"""Path classification against static pattern tables.

Each category is an ordered tuple of ``(pattern, reason)`` entries consumed
by one matcher. Sanitizer categories match anywhere in the full path, so
directory patterns such as ``fixtures/`` work. Risk-keyword tiers match
against the final path segment only.

Pure Python, no I/O.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Sequence

from prsignals.errors import ConfigurationError
from prsignals.models.signals import RiskTier


class Category(str, Enum):
    LOCKFILE = "lockfile"
    NON_CODE_ASSET = "non_code_asset"
    TEST = "test"
    CONFIG = "config"
    HIGH_RISK = "high_risk"
    MEDIUM_RISK = "medium_risk"
    LOW_RISK = "low_risk"


@dataclass(frozen=True)
class PathPattern:
    pattern: re.Pattern[str]
    reason: str


@dataclass(frozen=True)
class PathMatch:
    """The first pattern that matched a path within a category."""

    category: Category
    reason: str


# Source-file suffix shared by the keyword tables.
_SRC = r"\.(?:[cm]?[jt]sx?|py|rb|go|java|kt|cs|php|rs|scala|swift)$"


def _table(*entries: tuple[str, str], flags: int = re.IGNORECASE) -> tuple[PathPattern, ...]:
    return tuple(PathPattern(re.compile(p, flags), reason) for p, reason in entries)


_LOCKFILE_PATTERNS = _table(
    (r"package-lock\.json$", "npm lockfile"),
    (r"yarn\.lock$", "Yarn lockfile"),
    (r"pnpm-lock\.yaml$", "pnpm lockfile"),
    (r"bun\.lockb?$", "Bun lockfile"),
    (r"Gemfile\.lock$", "Bundler lockfile"),
    (r"poetry\.lock$", "Poetry lockfile"),
    (r"uv\.lock$", "uv lockfile"),
    (r"Cargo\.lock$", "Cargo lockfile"),
    (r"go\.mod$", "Go module file"),
    (r"go\.sum$", "Go checksum file"),
    (r"\.csproj\.packages\.config$", "NuGet packages file"),
    (r"nuget\.packages$", "NuGet packages file"),
    (r"requirements\.txt$", "pip requirements"),
    (r"Pipfile\.lock$", "Pipenv lockfile"),
    (r"composer\.lock$", "Composer lockfile"),
    flags=0,
)

_NON_CODE_PATTERNS = _table(
    (r"\.(?:jpg|jpeg|png|gif|ico|bmp|webp|svg)$", "Image"),
    (r"\.(?:mp3|mp4|wav|flac|ogg|webm)$", "Media"),
    (r"\.(?:zip|tar|gz|tgz|rar|7z)$", "Archive"),
    (r"\.(?:pdf|doc|docx|xls|xlsx|ppt|pptx)$", "Document"),
    (r"\.(?:eot|ttf|woff|woff2|otf)$", "Font"),
)

_TEST_PATTERNS = _table(
    (r"\.test\.[jt]sx?$", "Test file"),
    (r"\.spec\.[jt]sx?$", "Test file"),
    (r"\.test\.[jt]sx?\.snap$", "Test snapshot"),
    (r"(?:^|/)test_[^/]*\.py$", "Test file"),
    (r"_test\.(?:py|go)$", "Test file"),
    (r"(?:^|/)__tests__/", "Test directory"),
    (r"(?:^|/)fixtures/", "Test fixtures"),
    (r"(?:^|/)conftest\.py$", "pytest fixtures"),
)

_CONFIG_PATTERNS = _table(
    (r"\.eslintrc", "ESLint config"),
    (r"\.prettierrc", "Prettier config"),
    (r"tsconfig(?:\.[\w-]+)?\.json$", "TypeScript config"),
    (r"jest\.config\.", "Jest config"),
    (r"vitest\.config\.", "Vitest config"),
    (r"(?:^|/)\.editorconfig$", "Editor config"),
    (r"(?:^|/)(?:setup\.cfg|tox\.ini|\.flake8)$", "Python tool config"),
    (r"(?:^|/)\.vscode/", "Editor settings"),
    (r"(?:^|/)\.idea/", "Editor settings"),
)

_HIGH_RISK_PATTERNS = _table(
    (rf"auth{_SRC}", "Authentication logic"),
    (rf"login{_SRC}", "Login handling"),
    (rf"logout{_SRC}", "Logout handling"),
    (rf"session{_SRC}", "Session management"),
    (rf"jwt{_SRC}", "JWT handling"),
    (rf"oauth{_SRC}", "OAuth handling"),
    (rf"password{_SRC}", "Password handling"),
    (r"credential", "Credentials handling"),
    (r"secret", "Secrets handling"),
    (r"api[_-]?key", "API key handling"),
    (rf"schema{_SRC}", "Database schema"),
    (r"migration", "Database migration"),
    (r"seeder", "Database seeding"),
    (r"permission", "Permission logic"),
    (r"role", "Role-based access"),
    (rf"access{_SRC}", "Access control"),
    (r"security", "Security-related"),
    (r"firewall", "Firewall rules"),
    (r"rate[\s_-]?limit", "Rate limiting"),
    (r"csrf", "CSRF protection"),
    (r"cors", "CORS configuration"),
    (r"ssl", "SSL/TLS configuration"),
    (r"https?\.config", "HTTP configuration"),
)

_MEDIUM_RISK_PATTERNS = _table(
    (rf"controllers?{_SRC}", "API controller"),
    (rf"services?{_SRC}", "Business logic"),
    (rf"routes?{_SRC}", "API route"),
    (r"endpoint", "API endpoint"),
    (rf"api{_SRC}", "API definition"),
    (rf"handlers?{_SRC}", "Request handler"),
    (r"middleware", "Middleware"),
    (r"validator", "Input validation"),
    (r"serializer", "Response serialization"),
    (r"transformer", "Data transformation"),
    (rf"models?{_SRC}", "Data model"),
    (r"entity", "Database entity"),
    (r"repository", "Data repository"),
    (r"dao", "Data access object"),
)

_LOW_RISK_PATTERNS = _table(
    (r"\.(?:test|spec)\.[jt]sx?$", "Test file"),
    (r"test\.[jt]sx?$", "Test file"),
    (r"^test_.*\.py$", "Test file"),
    (r"_test\.(?:py|go)$", "Test file"),
    (r"fixture", "Test fixture"),
    (r"mock", "Test mock"),
    (r"\.d\.ts$", "Type definition"),
    (r"types\.[jt]s$", "Type definitions"),
    (r"readme", "Documentation"),
    (r"changelog", "Changelog"),
    (r"license", "License file"),
    (r"\.(?:md|rst)$", "Documentation"),
    (r"\.json$", "JSON config (low risk)"),
    (r"\.ya?ml$", "YAML config (low risk)"),
    (r"\.toml$", "TOML config (low risk)"),
    (r"\.env", "Environment config"),
    (r"gitignore", "Git ignore"),
    (r"dockerfile", "Docker configuration"),
    (r"docker-compose", "Docker compose"),
    (r"\.dockerignore", "Docker ignore"),
)

DEFAULT_TABLES: dict[Category, tuple[PathPattern, ...]] = {
    Category.LOCKFILE: _LOCKFILE_PATTERNS,
    Category.NON_CODE_ASSET: _NON_CODE_PATTERNS,
    Category.TEST: _TEST_PATTERNS,
    Category.CONFIG: _CONFIG_PATTERNS,
    Category.HIGH_RISK: _HIGH_RISK_PATTERNS,
    Category.MEDIUM_RISK: _MEDIUM_RISK_PATTERNS,
    Category.LOW_RISK: _LOW_RISK_PATTERNS,
}

# Categories matched against the final path segment instead of the full path.
_NAME_SCOPED = frozenset({Category.HIGH_RISK, Category.MEDIUM_RISK, Category.LOW_RISK})

# Tier categories in evaluation order.
TIER_CATEGORIES: tuple[tuple[RiskTier, Category], ...] = (
    (RiskTier.HIGH, Category.HIGH_RISK),
    (RiskTier.MEDIUM, Category.MEDIUM_RISK),
    (RiskTier.LOW, Category.LOW_RISK),
)
_TIER_TO_CATEGORY = dict(TIER_CATEGORIES)


def base_name(path: str) -> str:
    """Return the final segment of a ``/``-separated path."""
    return path.rstrip("/").rsplit("/", 1)[-1]


def compile_custom(pattern: str, reason: str) -> PathPattern:
    """Compile a caller-supplied pattern, case-insensitively."""
    try:
        return PathPattern(re.compile(pattern, re.IGNORECASE), reason)
    except re.error as e:
        raise ConfigurationError(f"invalid path pattern {pattern!r}: {e}") from e


class PathClassifier:
    """Classifies paths into categories and risk tiers.

    ``custom`` holds ``(tier, pattern, reason)`` triples; a tier's custom
    patterns are tried before its built-in table.
    """

    def __init__(
        self,
        custom: Iterable[tuple[RiskTier, str, str]] = (),
        tables: dict[Category, Sequence[PathPattern]] | None = None,
    ) -> None:
        base = dict(DEFAULT_TABLES if tables is None else tables)
        extra: dict[Category, list[PathPattern]] = {}
        for tier, pattern, reason in custom:
            extra.setdefault(_TIER_TO_CATEGORY[tier], []).append(
                compile_custom(pattern, reason)
            )
        self._tables: dict[Category, tuple[PathPattern, ...]] = {
            category: tuple(extra.get(category, ())) + tuple(base.get(category, ()))
            for category in Category
        }

    @classmethod
    def from_config(cls, config) -> "PathClassifier":
        """Build a classifier from an ``AnalysisConfig``."""
        return cls(
            (p.tier, p.pattern, p.reason) for p in config.custom_risk_patterns
        )

    def match(self, path: str, category: Category) -> PathMatch | None:
        """Return the first matching pattern in ``category``, or None."""
        subject = base_name(path) if category in _NAME_SCOPED else path
        for entry in self._tables[category]:
            if entry.pattern.search(subject):
                return PathMatch(category=category, reason=entry.reason)
        return None

    def is_in(self, path: str, category: Category) -> bool:
        return self.match(path, category) is not None

    def classify_tier(self, path: str) -> tuple[RiskTier, str] | None:
        """Return ``(tier, reason)`` for the first tier that matches."""
        for tier, category in TIER_CATEGORIES:
            found = self.match(path, category)
            if found is not None:
                return tier, found.reason
        return None
