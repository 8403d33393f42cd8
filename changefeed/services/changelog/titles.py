"""
Conventional-commit style PR title classification.

Titles like `fix(parser)!: handle empty input.` are split into type, scope,
subject and a breaking flag. Anything that doesn't look conventional is still
accepted and classified as a generic `change`.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass

KNOWN_TYPES: frozenset[str] = frozenset(
    {
        "feat",
        "fix",
        "chore",
        "docs",
        "refactor",
        "perf",
        "test",
        "build",
        "ci",
        "style",
        "revert",
        "change",
    }
)

FALLBACK_TYPE = "change"
BREAKING_LABEL = "breaking"
UNTITLED = "Untitled"

_SCOPED_TITLE = re.compile(r"^([A-Za-z]+)(?:\(([^)]+)\))?(!)?:\s*(.+)$")
_PLAIN_TITLE = re.compile(r"^([A-Za-z]+)(!)?:\s*(.+)$")


@dataclass(frozen=True)
class ClassifiedTitle:
    """A PR title split into its conventional-commit parts."""

    type: str
    scope: str | None
    subject: str
    breaking: bool


def normalize_type(raw_type: str) -> str:
    """Lower-case a type token, mapping anything unknown to `change`."""
    lowered = raw_type.lower()
    return lowered if lowered in KNOWN_TYPES else FALLBACK_TYPE


def normalize_subject(subject: str) -> str:
    """Trim, drop one trailing period and capitalize the first character."""
    trimmed = subject.strip()
    if trimmed.endswith("."):
        trimmed = trimmed[:-1]
    if not trimmed:
        return trimmed
    return trimmed[0].upper() + trimmed[1:]


def classify_title(raw_title: str, labels: Iterable[str] = ()) -> ClassifiedTitle:
    """
    Classify a PR title.

    Args:
        raw_title: Title exactly as written on the PR
        labels: PR label names; a `breaking` label (any case) marks the change breaking

    Returns:
        ClassifiedTitle (never raises)
    """
    normalized = (raw_title or "").strip()
    has_breaking_label = any((label or "").lower() == BREAKING_LABEL for label in labels)

    match = _SCOPED_TITLE.match(normalized)
    if match:
        raw_type, raw_scope, bang, subject = match.groups()
        return ClassifiedTitle(
            type=normalize_type(raw_type),
            scope=raw_scope.lower() if raw_scope else None,
            subject=normalize_subject(subject),
            breaking=bool(bang) or has_breaking_label,
        )

    match = _PLAIN_TITLE.match(normalized)
    if match:
        raw_type, bang, subject = match.groups()
        return ClassifiedTitle(
            type=normalize_type(raw_type),
            scope=None,
            subject=normalize_subject(subject),
            breaking=bool(bang) or has_breaking_label,
        )

    return ClassifiedTitle(
        type=FALLBACK_TYPE,
        scope=None,
        subject=normalize_subject(normalized),
        breaking=has_breaking_label,
    )


def format_title(classified: ClassifiedTitle) -> str:
    """Display title for a classified PR."""
    return classified.subject or UNTITLED
