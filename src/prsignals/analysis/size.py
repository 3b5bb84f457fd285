"""Change-set size metrics and warning/block thresholds."""

from __future__ import annotations

from typing import Sequence

from prsignals.models.diff import ChangeType, FileChange
from prsignals.models.signals import SizeAssessment, SizeMetrics


def calculate_size(files: Sequence[FileChange]) -> SizeMetrics:
    """Count files and changed lines. Renames count as modifications."""
    return SizeMetrics(
        files_changed=len(files),
        additions=sum(f.additions for f in files),
        deletions=sum(f.deletions for f in files),
        files_added=sum(1 for f in files if f.change_type is ChangeType.ADD),
        files_modified=sum(
            1 for f in files if f.change_type in (ChangeType.MODIFY, ChangeType.RENAME)
        ),
        files_deleted=sum(1 for f in files if f.change_type is ChangeType.DELETE),
    )


def assess_size(metrics: SizeMetrics, warning_threshold: int, block_threshold: int) -> SizeAssessment:
    """Compare changed lines against the thresholds; 0 disables a check."""
    return SizeAssessment(
        metrics=metrics,
        warning_triggered=warning_threshold > 0 and metrics.total_lines > warning_threshold,
        should_block=block_threshold > 0 and metrics.total_lines > block_threshold,
        warning_threshold=warning_threshold,
        block_threshold=block_threshold,
    )


def format_size_markdown(metrics: SizeMetrics) -> str:
    return (
        f"{metrics.total_lines} lines changed "
        f"({metrics.additions} additions, {metrics.deletions} deletions) "
        f"across {metrics.files_changed} files"
    )


def size_warning_message(assessment: SizeAssessment) -> str | None:
    """Human-readable warning or block message, or None when within limits."""
    metrics = assessment.metrics
    if assessment.should_block:
        return (
            f"Change too large: {format_size_markdown(metrics)}. "
            f"Exceeds maximum {assessment.block_threshold} lines. "
            "Consider splitting it into smaller changes."
        )
    if assessment.warning_triggered:
        over = round(metrics.total_lines / assessment.warning_threshold * 100) - 100
        return (
            f"Size warning: {format_size_markdown(metrics)} "
            f"(exceeds {assessment.warning_threshold} line threshold by {over}%)"
        )
    return None
