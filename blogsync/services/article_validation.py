"""Quality gate for articles pulled from dev.to."""

from __future__ import annotations

import re

from blogsync.models.articles import ValidationResult
from blogsync.models.contracts import RejectionReason

MIN_BODY_LENGTH = 150
MIN_ALPHANUMERIC_RATIO = 0.4

# Applied in order; code goes first so links inside code do not count as text.
_NON_TEXT_PATTERNS = (
    re.compile(r"```.*?```", re.DOTALL),  # code blocks
    re.compile(r"`[^`]*`"),  # inline code
    re.compile(r"!\[[^\]]*\]\([^)]*\)"),  # images
    re.compile(r"\[[^\]]*\]\([^)]*\)"),  # links
    re.compile(r"https?://\S+"),  # raw URLs
    re.compile(r"<[^>]+>"),  # HTML tags
    re.compile(r"\{%[^%]*%\}"),  # liquid tags
)
_ALPHANUMERIC_RE = re.compile(r"[A-Za-z0-9]")
# Bare pronouns must be followed by whitespace, so "Part I" and "I/O" pass.
FIRST_PERSON_TITLE_RE = re.compile(
    r"\b(?:i|my|we|our)(?=\s)|\b(?:i|we)['’][a-z]+\b",
    re.IGNORECASE,
)


def get_plain_text(markdown: str | None) -> str:
    """Strip code, media, links, URLs and markup tags from ``markdown``."""
    text = markdown or ""
    for pattern in _NON_TEXT_PATTERNS:
        text = pattern.sub("", text)
    return text.strip()


def validate_article(title: str | None, body_markdown: str | None) -> ValidationResult:
    """
    Decide whether an article is worth importing.

    Checks run in priority order and the first failure is reported:
    too little prose, too many symbols relative to letters and digits,
    then a first-person title.
    """
    plain_text = get_plain_text(body_markdown)

    if len(plain_text) < MIN_BODY_LENGTH:
        return ValidationResult.reject(
            RejectionReason.TOO_SHORT,
            f"too little text content ({len(plain_text)} chars, min {MIN_BODY_LENGTH})",
        )

    ratio = len(_ALPHANUMERIC_RE.findall(plain_text)) / len(plain_text)
    if ratio < MIN_ALPHANUMERIC_RATIO:
        return ValidationResult.reject(
            RejectionReason.LOW_DENSITY,
            f"too many non-text symbols ({round(ratio * 100)}% alphanumeric)",
        )

    if FIRST_PERSON_TITLE_RE.search(title or ""):
        return ValidationResult.reject(
            RejectionReason.FIRST_PERSON_TITLE,
            f'first-person title: "{title}"',
        )

    return ValidationResult.accept()
