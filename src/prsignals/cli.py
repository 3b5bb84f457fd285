"""Command-line entry point — analyse a diff file and print the report.

Usage: prsignals --diff changes.diff --title "Fix auth" [--commits commits.json]

``commits.json`` holds a list of ``{"sha", "message", "diff"}`` objects.
Configuration comes from PRSIGNALS_* environment variables.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from prsignals.config.bootstrap import load_analysis_config
from prsignals.config.providers import list_providers
from prsignals.models.signals import CommitRecord
from prsignals.report import build_report, format_report_markdown

logger = logging.getLogger(__name__)


def _read_text(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8", errors="replace")


def _load_commits(path: str | None) -> list[CommitRecord]:
    if not path:
        return []
    raw = json.loads(_read_text(path))
    if not isinstance(raw, list):
        raise TypeError(f"{path}: expected a JSON list of commit objects")

    commits: list[CommitRecord] = []
    for item in raw:
        if not isinstance(item, dict):
            raise TypeError(f"{path}: commit entries must be objects, got {type(item).__name__}")
        diff = item.get("diff")
        if diff is not None and not isinstance(diff, str):
            raise TypeError(f"{path}: diff of commit {item.get('sha', '?')} must be a string")
        commits.append(CommitRecord(
            sha=str(item.get("sha", "")),
            message=str(item.get("message", "")).split("\n", 1)[0],
            diff=diff,
        ))
    return commits


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Deterministic change-set signals")
    parser.add_argument("--diff", default="-", help="Unified diff file ('-' for stdin)")
    parser.add_argument("--title", default=None, help="Change request title")
    parser.add_argument("--body", default=None, help="Change request description")
    parser.add_argument("--commits", default=None, help="JSON file of commits with diffs")
    parser.add_argument("--format", choices=("json", "markdown"), default="json")
    parser.add_argument("--list-providers", action="store_true", help="Print provider budgets and exit")
    args = parser.parse_args(argv)

    if args.list_providers:
        print(json.dumps(list_providers(), indent=2))
        return 0

    try:
        cfg = load_analysis_config()
    except (ValidationError, ValueError) as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2
    logging.basicConfig(
        level=getattr(logging, cfg.log_level),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        stream=sys.stderr,
    )

    try:
        diff = _read_text(args.diff)
        commits = _load_commits(args.commits)
    except (OSError, json.JSONDecodeError, TypeError) as e:
        logger.error("Could not read input: %s", e)
        return 1

    report = build_report(diff, title=args.title, body=args.body, commits=commits, config=cfg)
    if args.format == "markdown":
        sys.stdout.write(format_report_markdown(report))
    else:
        print(json.dumps(report.to_dict(), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
