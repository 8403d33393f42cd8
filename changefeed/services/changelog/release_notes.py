"""
One-line release note extraction from free-form PR bodies.

PR templates put the release note in different places, so extraction runs an
ordered chain of strategies:

1. An inline field: `Release note: ...` / `Release notes (1 line): ...`.
   An empty field reads the next meaningful line instead. Once a field line
   is present its answer is final, even when that answer is None.
2. A `## Release notes` heading (levels 2-4): first meaningful line of the section.
3. The first paragraph of the body.

Every strategy returns None when it finds nothing, and so does the chain as a
whole: an absent note is never an empty string.
"""

import re
from collections.abc import Callable, Iterable

MAX_SUMMARY_LENGTH = 160
ELLIPSIS = "..."

_FIELD = re.compile(r"^\s*release notes?(?:\s*\(1 line\))?:\s*(.*)$", re.IGNORECASE)
_RELEASE_HEADING = re.compile(r"^(#{2,4})\s+release notes?\s*$", re.IGNORECASE)
_ANY_HEADING = re.compile(r"^(#{1,6})\s+")
_CHECKBOX = re.compile(r"^\s*[-*]\s*\[[ xX]\]\s*")
_LIST_MARKER = re.compile(r"^\s*(?:[-*]|\d+\.)\s*")
_LINE_BREAK = re.compile(r"\r?\n")

Strategy = Callable[[list[str]], str | None]


def clamp_summary(text: str) -> str:
    """Truncate to MAX_SUMMARY_LENGTH, ending in an ellipsis. Idempotent."""
    if len(text) <= MAX_SUMMARY_LENGTH:
        return text
    cut = MAX_SUMMARY_LENGTH - len(ELLIPSIS)
    return f"{text[:cut].strip()}{ELLIPSIS}"


def _strip_list_marker(text: str) -> str:
    return _LIST_MARKER.sub("", text, count=1).strip()


def normalize_summary(text: str) -> str | None:
    """Normalize a candidate line: drop list marker and one trailing period, clamp."""
    cleaned = _strip_list_marker(text)
    if cleaned.endswith("."):
        cleaned = cleaned[:-1]
    if not cleaned:
        return None
    return clamp_summary(cleaned)


def _normalize_paragraph(lines: list[str]) -> str | None:
    # Paragraphs keep their closing punctuation
    cleaned = _strip_list_marker(" ".join(lines))
    if not cleaned:
        return None
    return clamp_summary(cleaned)


def is_meaningful(line: str) -> bool:
    """A line counts unless it is blank or a task checkbox."""
    return bool(line.strip()) and not _CHECKBOX.match(line)


def first_meaningful_line(lines: Iterable[str]) -> str | None:
    """Return the first line that survives normalization, if any."""
    for line in lines:
        if not is_meaningful(line):
            continue
        normalized = normalize_summary(line)
        if normalized:
            return normalized
    return None


def has_inline_field(lines: list[str]) -> bool:
    """True if any line is a `Release note:` field, filled in or not."""
    return any(_FIELD.match(line) for line in lines)


def from_inline_field(lines: list[str]) -> str | None:
    """`Release note: <text>`, or the first meaningful line after an empty field."""
    for index, line in enumerate(lines):
        match = _FIELD.match(line)
        if not match:
            continue
        inline = normalize_summary(match.group(1) or "")
        if inline:
            return inline
        return first_meaningful_line(lines[index + 1 :])
    return None


def from_heading_section(lines: list[str]) -> str | None:
    """First meaningful line under a `## Release notes` heading."""
    for index, line in enumerate(lines):
        match = _RELEASE_HEADING.match(line)
        if not match:
            continue
        level = len(match.group(1))

        section: list[str] = []
        for candidate in lines[index + 1 :]:
            heading = _ANY_HEADING.match(candidate)
            if heading and len(heading.group(1)) <= level:
                break
            section.append(candidate)

        found = first_meaningful_line(section)
        if found:
            return found
    return None


def from_first_paragraph(lines: list[str]) -> str | None:
    """First paragraph of the body, joined with single spaces."""
    paragraph: list[str] = []

    for line in lines:
        if not line.strip() or _ANY_HEADING.match(line):
            candidate = _normalize_paragraph(paragraph)
            paragraph = []
            if candidate:
                return candidate
            continue
        if _CHECKBOX.match(line):
            continue
        paragraph.append(line.strip())

    return _normalize_paragraph(paragraph)


# Tried in order when the body has no inline field
FALLBACK_STRATEGIES: tuple[Strategy, ...] = (
    from_heading_section,
    from_first_paragraph,
)


def extract_release_note(body: str | None) -> str | None:
    """
    Extract a one-line release note from a PR body.

    Args:
        body: PR description (may be None or empty)

    Returns:
        Summary of at most MAX_SUMMARY_LENGTH characters, or None
    """
    if not body:
        return None

    lines = _LINE_BREAK.split(body)
    if has_inline_field(lines):
        return from_inline_field(lines)

    for strategy in FALLBACK_STRATEGIES:
        summary = strategy(lines)
        if summary:
            return summary
    return None
