"""Ticket reference detection in titles, descriptions and commit messages.

Built-in patterns find JIRA-style keys (``PROJ-123``) and GitHub issue
references (``#123``). A caller-supplied pattern replaces both. Results are
de-duplicated by ticket id, first occurrence wins.
"""

from __future__ import annotations

import re
from typing import Iterable, Sequence

from prsignals.errors import ConfigurationError
from prsignals.models.signals import TicketRef

JIRA = "jira"
GITHUB_ISSUE = "github-issue"
CUSTOM = "custom"

NO_TICKETS_MARKDOWN = "No related tickets found."

_JIRA_RE = re.compile(r"\b([A-Z][A-Z0-9]+-\d+)\b")
_GITHUB_RE = re.compile(r"#(\d{1,6})\b")
_ID_PLACEHOLDER_RE = re.compile(r"\{\{id\}\}")
_GITHUB_FALLBACK_BASE = "https://github.com"

_TYPE_LABELS = {
    JIRA: "JIRA",
    GITHUB_ISSUE: "GitHub",
    CUSTOM: "Custom",
}


def _url_from_template(ticket_id: str, template: str | None) -> str:
    if not template:
        return "#"
    return _ID_PLACEHOLDER_RE.sub(lambda _: ticket_id, template)


def _github_issue_url(number: str, base_url: str | None) -> str:
    base = (base_url or _GITHUB_FALLBACK_BASE).rstrip("/")
    return f"{base}/issues/{number}"


class TicketDetector:
    """Finds ticket references with either the built-in or a custom pattern.

    Raises ConfigurationError at construction if ``pattern`` does not
    compile.
    """

    def __init__(
        self,
        pattern: str | None = None,
        url_template: str | None = None,
        github_base_url: str | None = None,
    ) -> None:
        self.url_template = url_template
        self.github_base_url = github_base_url
        self.custom: re.Pattern[str] | None = None
        if pattern and pattern.strip():
            try:
                self.custom = re.compile(pattern.strip())
            except re.error as e:
                raise ConfigurationError(f"invalid ticket pattern {pattern!r}: {e}") from e

    @classmethod
    def from_config(cls, config) -> "TicketDetector":
        return cls(
            pattern=config.ticket_pattern,
            url_template=config.ticket_url_template,
            github_base_url=config.github_base_url,
        )

    def _candidates(self, text: str) -> Iterable[TicketRef]:
        if self.custom is not None:
            for match in self.custom.finditer(text):
                ticket_id = match.group(1) if match.re.groups and match.group(1) else match.group(0)
                if ticket_id:
                    yield TicketRef(CUSTOM, ticket_id, _url_from_template(ticket_id, self.url_template))
            return

        for match in _JIRA_RE.finditer(text):
            ticket_id = match.group(1)
            yield TicketRef(JIRA, ticket_id, _url_from_template(ticket_id, self.url_template))
        for match in _GITHUB_RE.finditer(text):
            number = match.group(1)
            yield TicketRef(GITHUB_ISSUE, f"#{number}", _github_issue_url(number, self.github_base_url))

    def detect(self, text: str) -> list[TicketRef]:
        return self.detect_many([text])

    def detect_many(self, texts: Iterable[str | None]) -> list[TicketRef]:
        seen: dict[str, TicketRef] = {}
        for text in texts:
            if not text:
                continue
            for ticket in self._candidates(text):
                seen.setdefault(ticket.id, ticket)
        return list(seen.values())

    def detect_from_sources(
        self,
        title: str | None = None,
        body: str | None = None,
        commits: Sequence[str] = (),
    ) -> list[TicketRef]:
        """Scan title, then body, then each commit message."""
        return self.detect_many([title, body, *commits])


def detect_tickets(
    text: str,
    pattern: str | None = None,
    url_template: str | None = None,
    github_base_url: str | None = None,
) -> list[TicketRef]:
    return TicketDetector(pattern, url_template, github_base_url).detect(text)


def detect_tickets_from_sources(
    title: str | None = None,
    body: str | None = None,
    commits: Sequence[str] = (),
    *,
    pattern: str | None = None,
    url_template: str | None = None,
    github_base_url: str | None = None,
) -> list[TicketRef]:
    detector = TicketDetector(pattern, url_template, github_base_url)
    return detector.detect_from_sources(title, body, commits)


def format_tickets_markdown(tickets: Sequence[TicketRef]) -> str:
    if not tickets:
        return NO_TICKETS_MARKDOWN
    return "\n".join(
        f"- [{t.id}]({t.url}) ({_TYPE_LABELS.get(t.type, t.type.capitalize())})"
        for t in tickets
    )
