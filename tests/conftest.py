"""Shared test fixtures."""

from __future__ import annotations

import os

import pytest

from prsignals.models.signals import CommitRecord

SAMPLE_DIFF = (
    "diff --git a/src/auth/login.ts b/src/auth/login.ts\n"
    "index 1111111..2222222 100644\n"
    "--- a/src/auth/login.ts\n"
    "+++ b/src/auth/login.ts\n"
    "@@ -1,2 +1,4 @@\n"
    ' import { db } from "./db";\n'
    "-export function login() {}\n"
    "+export function login(user: string) {\n"
    "+  return db.check(user);\n"
    "+}\n"
    "diff --git a/package-lock.json b/package-lock.json\n"
    "index 3333333..4444444 100644\n"
    "--- a/package-lock.json\n"
    "+++ b/package-lock.json\n"
    "@@ -1,1 +1,1 @@\n"
    '-  "version": "1.0.0"\n'
    '+  "version": "1.0.1"\n'
    "diff --git a/src/utils/helpers.ts b/src/utils/helpers.ts\n"
    "new file mode 100644\n"
    "index 0000000..5555555\n"
    "--- /dev/null\n"
    "+++ b/src/utils/helpers.ts\n"
    "@@ -0,0 +1,3 @@\n"
    "+export function formatDate(d: Date): string {\n"
    "+  return d.toISOString();\n"
    "+}\n"
    "diff --git a/assets/logo.png b/assets/logo.png\n"
    "index 6666666..7777777 100644\n"
    "Binary files a/assets/logo.png and b/assets/logo.png differ\n"
)


@pytest.fixture
def sample_diff() -> str:
    """Four sections: HIGH-risk source, lockfile, new helper, binary image."""
    return SAMPLE_DIFF


@pytest.fixture
def sample_commits() -> list[CommitRecord]:
    """One commit that matches its diff and one that does not."""
    return [
        CommitRecord(
            sha="a" * 40,
            message="PROJ-7 tighten login validation",
            diff="+// login validation for PROJ-7\n+export function login(user: string) {\n",
        ),
        CommitRecord(
            sha="b" * 40,
            message="Rework payment gateway",
            diff="+README typo\n",
        ),
    ]


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove any PRSIGNALS_* variables inherited from the shell."""
    for key in list(os.environ):
        if key.startswith("PRSIGNALS_"):
            monkeypatch.delenv(key, raising=False)
