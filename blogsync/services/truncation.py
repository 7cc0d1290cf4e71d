"""Fit post commentary into a hard character budget."""

from __future__ import annotations

from blogsync.services.markdown_rewriter import SEPARATOR

PARAGRAPH_BREAK = "\n\n"
MIN_BREAK_RATIO = 0.5


def article_url(slug: str | None, blog_base_url: str | None, fallback_url: str) -> str:
    """Return the canonical blog URL for ``slug``, or ``fallback_url``."""
    if slug and blog_base_url:
        return f"{blog_base_url.rstrip('/')}/blog/{slug}"
    return fallback_url


def build_read_more(slug: str | None, blog_base_url: str | None, fallback_url: str) -> str:
    """Call-to-action appended when commentary is truncated."""
    url = article_url(slug, blog_base_url, fallback_url)
    return f"\n\n{SEPARATOR}\n📖 Read the full article: {url}"


def truncate_to_limit(text: str, max_length: int, suffix: str) -> str:
    """
    Cut ``text`` so that ``text + suffix`` fits in ``max_length`` characters.

    The cut lands on the last paragraph break before the budget when that break
    keeps at least half of the available room; otherwise it is a hard cut.

    Args:
        text: Full commentary.
        max_length: Hard limit for the returned string.
        suffix: Text appended after a cut.

    Returns:
        ``text`` unchanged when it fits, else the truncated text plus ``suffix``.

    Raises:
        ValueError: If ``suffix`` alone does not leave room for any text.
    """
    if len(suffix) >= max_length:
        raise ValueError(
            f"Suffix length {len(suffix)} must be smaller than max length {max_length}"
        )
    if len(text) <= max_length:
        return text

    cutoff = max_length - len(suffix)
    # Breaks starting at or before the cutoff; the break itself is dropped.
    last_break = text.rfind(PARAGRAPH_BREAK, 0, cutoff + len(PARAGRAPH_BREAK))
    if last_break >= cutoff * MIN_BREAK_RATIO:
        truncated = text[:last_break]
    else:
        truncated = text[:cutoff]
    return truncated + suffix
