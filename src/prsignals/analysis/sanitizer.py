"""Diff sanitizer — drops noise files and rebuilds diff text.

Lockfiles and non-code assets are excluded unless explicitly re-enabled;
tests and config files only when asked. A file is kept iff it falls in
none of the enabled categories, so the order of checks never matters and
sanitizing twice gives the same result as sanitizing once.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from prsignals.analysis.paths import Category, PathClassifier
from prsignals.models.diff import LINE_MARKERS, ChangeType, FileChange

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SanitizeOptions:
    exclude_lockfiles: bool = True
    exclude_non_code_assets: bool = True
    exclude_tests: bool = False
    exclude_configs: bool = False

    @classmethod
    def from_config(cls, config) -> "SanitizeOptions":
        return cls(
            exclude_lockfiles=config.exclude_lockfiles,
            exclude_non_code_assets=config.exclude_non_code_assets,
            exclude_tests=config.exclude_tests,
            exclude_configs=config.exclude_configs,
        )

    def excluded_categories(self) -> tuple[Category, ...]:
        toggles = (
            (self.exclude_lockfiles, Category.LOCKFILE),
            (self.exclude_non_code_assets, Category.NON_CODE_ASSET),
            (self.exclude_tests, Category.TEST),
            (self.exclude_configs, Category.CONFIG),
        )
        return tuple(category for enabled, category in toggles if enabled)


_DEFAULT_CLASSIFIER = PathClassifier()


def excluded_by(
    path: str,
    options: SanitizeOptions,
    classifier: PathClassifier | None = None,
) -> Category | None:
    """Return the first enabled category ``path`` belongs to, if any."""
    classifier = classifier or _DEFAULT_CLASSIFIER
    for category in options.excluded_categories():
        if classifier.is_in(path, category):
            return category
    return None


def sanitize(
    files: Sequence[FileChange],
    options: SanitizeOptions | None = None,
    classifier: PathClassifier | None = None,
) -> list[FileChange]:
    """Return the files that belong to none of the excluded categories."""
    options = options or SanitizeOptions()
    kept: list[FileChange] = []
    for change in files:
        category = excluded_by(change.new_path, options, classifier)
        if category is None:
            kept.append(change)
        else:
            logger.debug("Excluding %s (%s)", change.new_path, category.value)
    return kept


def _render_file(change: FileChange) -> str:
    out = [f"diff --git a/{change.old_path} b/{change.new_path}"]
    if change.change_type is ChangeType.ADD:
        out.append("new file mode 100644")
    elif change.change_type is ChangeType.DELETE:
        out.append("deleted file mode 100644")
    elif change.change_type is ChangeType.RENAME:
        out.append(f"rename from {change.old_path}")
        out.append(f"rename to {change.new_path}")

    if change.hunks:
        old_side = "/dev/null" if change.change_type is ChangeType.ADD else f"a/{change.old_path}"
        new_side = "/dev/null" if change.change_type is ChangeType.DELETE else f"b/{change.new_path}"
        out.append(f"--- {old_side}")
        out.append(f"+++ {new_side}")
        for hunk in change.hunks:
            out.append(hunk.header)
            out.extend(LINE_MARKERS[line.kind] + line.text for line in hunk.lines)
    return "\n".join(out) + "\n"


def reconstruct(files: Sequence[FileChange]) -> str:
    """Regenerate canonical unified diff text from parsed files."""
    return "".join(_render_file(change) for change in files)
