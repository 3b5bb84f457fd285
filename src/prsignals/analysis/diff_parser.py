"""Unified diff parser — raw diff text to FileChange/Hunk/Line records.

Accepts git extended diffs (``diff --git`` headers with mode, rename and
binary lines) as well as plain ``---``/``+++`` unified diffs. Parsing is
best-effort: fragments that cannot be understood are skipped and the rest
of the diff is still returned.

Hunk bodies are line-driven. A hunk runs until the next section or hunk
header, so a header with wrong line counts neither drops changed lines nor
swallows the following file. Built hunks carry the counts of the lines
actually read.

Pure Python, no I/O.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from prsignals.models.diff import ChangeType, FileChange, Hunk, Line, LineKind

logger = logging.getLogger(__name__)

_GIT_HEADER_RE = re.compile(r"^diff --git a/(.+?) b/(.+)$")
_HUNK_HEADER_RE = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")
_DEV_NULL = "/dev/null"
# git format-patch signature line; ends a hunk once its counts are used up.
_SIGNATURE_SEPARATOR = "-- "

_MARKER_KINDS: dict[str, LineKind] = {
    " ": LineKind.CONTEXT,
    "+": LineKind.ADD,
    "-": LineKind.DELETE,
}


def _strip_side(raw: str) -> str:
    """Turn the path part of a ``---``/``+++`` line into a bare path."""
    path = raw.split("\t", 1)[0].strip()
    if len(path) > 1 and path[0] == path[-1] == '"':
        path = path[1:-1]
    if path.startswith(("a/", "b/")):
        path = path[2:]
    return path


def _starts_section(lines: list[str], i: int) -> bool:
    """True if ``lines[i]`` opens a file section or a hunk."""
    line = lines[i]
    if line.startswith("@@") or _GIT_HEADER_RE.match(line):
        return True
    return (
        line.startswith("--- ")
        and i + 1 < len(lines)
        and lines[i + 1].startswith("+++ ")
    )


@dataclass
class _HunkBuilder:
    old_start: int
    old_lines: int
    new_start: int
    new_lines: int
    old_left: int
    new_left: int
    lines: list[Line] = field(default_factory=list)

    @property
    def open(self) -> bool:
        return self.old_left > 0 or self.new_left > 0

    def take(self, kind: LineKind, text: str) -> None:
        self.lines.append(Line(kind=kind, text=text))
        if kind is not LineKind.ADD:
            self.old_left -= 1
        if kind is not LineKind.DELETE:
            self.new_left -= 1

    def build(self) -> Hunk:
        old_n = sum(1 for line in self.lines if line.kind is not LineKind.ADD)
        new_n = sum(1 for line in self.lines if line.kind is not LineKind.DELETE)
        if (old_n, new_n) != (self.old_lines, self.new_lines):
            logger.debug(
                "Hunk at -%d,+%d declared %d/%d lines, read %d/%d",
                self.old_start, self.new_start,
                self.old_lines, self.new_lines, old_n, new_n,
            )
        return Hunk(
            old_start=self.old_start,
            old_lines=old_n,
            new_start=self.new_start,
            new_lines=new_n,
            lines=tuple(self.lines),
        )


@dataclass
class _FileBuilder:
    old_path: str
    new_path: str
    change_type: ChangeType = ChangeType.MODIFY
    headers_done: bool = False
    hunks: list[Hunk] = field(default_factory=list)

    def build(self) -> FileChange:
        old_path, new_path = self.old_path, self.new_path
        if old_path == _DEV_NULL:
            old_path = new_path
        if new_path == _DEV_NULL:
            new_path = old_path
        return FileChange(
            old_path=old_path,
            new_path=new_path,
            change_type=self.change_type,
            hunks=tuple(self.hunks),
        )


def _parse_hunk_header(line: str) -> _HunkBuilder | None:
    m = _HUNK_HEADER_RE.match(line)
    if not m:
        return None
    old_start, old_lines, new_start, new_lines = m.groups()
    old_n = 1 if old_lines is None else int(old_lines)
    new_n = 1 if new_lines is None else int(new_lines)
    return _HunkBuilder(
        old_start=int(old_start),
        old_lines=old_n,
        new_start=int(new_start),
        new_lines=new_n,
        old_left=old_n,
        new_left=new_n,
    )


def _apply_extended_header(current: _FileBuilder, line: str) -> bool:
    """Apply a git extended header line. Returns False if not one."""
    if line.startswith("new file mode"):
        current.change_type = ChangeType.ADD
    elif line.startswith("deleted file mode"):
        current.change_type = ChangeType.DELETE
    elif line.startswith("rename from "):
        current.old_path = line[len("rename from "):]
        current.change_type = ChangeType.RENAME
    elif line.startswith("rename to "):
        current.new_path = line[len("rename to "):]
        current.change_type = ChangeType.RENAME
    elif line.startswith((
        "index ", "old mode", "new mode", "similarity index",
        "dissimilarity index", "copy from ", "copy to ", "Binary files ",
        "GIT binary patch",
    )):
        pass
    else:
        return False
    return True


def parse_diff(diff: str) -> list[FileChange]:
    """Parse unified diff text into an ordered list of FileChange.

    Every file section produces one entry, including metadata-only sections
    and repeated sections for the same path.
    """
    files: list[FileChange] = []
    if not diff or not diff.strip():
        return files

    current: _FileBuilder | None = None
    hunk: _HunkBuilder | None = None
    lines = diff.split("\n")
    i = 0

    def close_hunk() -> None:
        nonlocal hunk
        if hunk is not None and current is not None:
            current.hunks.append(hunk.build())
        hunk = None

    def close_file() -> None:
        nonlocal current
        close_hunk()
        if current is not None:
            files.append(current.build())
        current = None

    while i < len(lines):
        line = lines[i]
        i += 1

        if hunk is not None:
            if line.startswith("\\"):
                continue
            if not _starts_section(lines, i - 1):
                kind = _MARKER_KINDS.get(line[:1])
                if kind is not None and (hunk.open or line != _SIGNATURE_SEPARATOR):
                    hunk.take(kind, line[1:])
                    continue
                if hunk.open and line == "" and i < len(lines):
                    # Some tools strip the single space of blank context lines.
                    hunk.take(LineKind.CONTEXT, "")
                    continue
            if hunk.open:
                logger.debug("Hunk ended early at line %d: %r", i, line[:80])
            close_hunk()

        if line.startswith("\\"):
            continue

        header = _GIT_HEADER_RE.match(line)
        if header:
            close_file()
            current = _FileBuilder(
                old_path=header.group(1), new_path=header.group(2).rstrip("\r"),
            )
            continue

        if line.startswith("--- ") and i < len(lines) and lines[i].startswith("+++ "):
            old_side = _strip_side(line[4:])
            new_side = _strip_side(lines[i][4:])
            i += 1
            if current is None or current.headers_done or current.hunks:
                close_file()
                current = _FileBuilder(old_path=old_side, new_path=new_side)
            else:
                if old_side != _DEV_NULL:
                    current.old_path = old_side
                if new_side != _DEV_NULL:
                    current.new_path = new_side
            current.headers_done = True
            if old_side == _DEV_NULL:
                current.change_type = ChangeType.ADD
            elif new_side == _DEV_NULL:
                current.change_type = ChangeType.DELETE
            continue

        if line.startswith("@@"):
            if current is None:
                logger.debug("Skipping hunk outside any file section at line %d", i)
                continue
            hunk = _parse_hunk_header(line)
            if hunk is None:
                logger.debug("Skipping malformed hunk header at line %d: %r", i, line[:80])
            continue

        if current is not None and not current.hunks:
            if _apply_extended_header(current, line):
                continue

        if line.strip():
            logger.debug("Skipping unrecognised diff line %d: %r", i, line[:80])

    close_file()
    return files


def extract_changed_files(diff: str) -> list[str]:
    """Return the distinct new-side paths of ``diff`` in first-seen order."""
    seen: dict[str, None] = {}
    for change in parse_diff(diff):
        seen.setdefault(change.new_path, None)
    return list(seen)
