"""Stock cover image for articles that arrive without one."""

from __future__ import annotations

import re
from collections.abc import Sequence
from urllib.parse import quote

UNSPLASH_SOURCE = "https://source.unsplash.com/1200x630"
DEFAULT_KEYWORD = "technology"

_NON_ALPHANUMERIC_RE = re.compile(r"[^A-Za-z0-9]")


def _tag_list(tags: Sequence[str] | str | None) -> list[str]:
    if tags is None:
        return []
    if isinstance(tags, str):
        return [tag.strip() for tag in tags.split(",")]
    return [str(tag).strip() for tag in tags if tag is not None]


def fallback_keyword(tags: Sequence[str] | str | None) -> str:
    """First usable tag with symbols removed, or ``technology``."""
    for tag in _tag_list(tags):
        keyword = _NON_ALPHANUMERIC_RE.sub("", tag)
        if keyword:
            return keyword
    return DEFAULT_KEYWORD


def get_fallback_image_url(tags: Sequence[str] | str | None) -> str:
    """Build a deterministic Unsplash search URL from article tags."""
    return f"{UNSPLASH_SOURCE}/?{quote(fallback_keyword(tags), safe='')}"
