"""Structured diff model — files, hunks and lines produced by the diff parser."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ChangeType(str, Enum):
    ADD = "add"
    DELETE = "delete"
    MODIFY = "modify"
    RENAME = "rename"


class LineKind(str, Enum):
    CONTEXT = "context"
    ADD = "add"
    DELETE = "delete"


# Marker character written in front of each line kind in unified diff text.
LINE_MARKERS: dict[LineKind, str] = {
    LineKind.CONTEXT: " ",
    LineKind.ADD: "+",
    LineKind.DELETE: "-",
}


@dataclass(frozen=True)
class Line:
    """One line of a hunk, without its leading marker."""

    kind: LineKind
    text: str


@dataclass(frozen=True)
class Hunk:
    old_start: int
    old_lines: int
    new_start: int
    new_lines: int
    lines: tuple[Line, ...] = ()

    @property
    def header(self) -> str:
        return (
            f"@@ -{self.old_start},{self.old_lines} "
            f"+{self.new_start},{self.new_lines} @@"
        )


@dataclass(frozen=True)
class FileChange:
    """A single file section of a diff.

    A section with no hunks (mode change, binary file) is still a change.
    """

    old_path: str
    new_path: str
    change_type: ChangeType = ChangeType.MODIFY
    hunks: tuple[Hunk, ...] = field(default_factory=tuple)

    def iter_lines(self, *kinds: LineKind):
        """Yield lines across all hunks, optionally restricted to ``kinds``."""
        for hunk in self.hunks:
            for line in hunk.lines:
                if not kinds or line.kind in kinds:
                    yield line

    @property
    def additions(self) -> int:
        return sum(1 for _ in self.iter_lines(LineKind.ADD))

    @property
    def deletions(self) -> int:
        return sum(1 for _ in self.iter_lines(LineKind.DELETE))
