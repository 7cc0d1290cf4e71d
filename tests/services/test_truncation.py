"""Tests for length-budget truncation."""

import pytest

from blogsync.services.markdown_rewriter import SEPARATOR
from blogsync.services.truncation import article_url, build_read_more, truncate_to_limit

SUFFIX = "...read more at blog"  # 20 chars


class TestTruncateToLimit:
    def test_short_text_unchanged(self):
        assert truncate_to_limit("hello", 450, SUFFIX) == "hello"

    def test_text_exactly_at_limit_unchanged(self):
        text = "a" * 450
        assert truncate_to_limit(text, 450, SUFFIX) == text

    def test_cuts_at_paragraph_break(self):
        first = "a" * 400
        text = first + "\n\n" + "b" * 500

        result = truncate_to_limit(text, 450, SUFFIX)

        assert result == first + SUFFIX
        assert len(result) <= 450

    def test_hard_cut_when_break_too_early(self):
        text = "a" * 100 + "\n\n" + "b" * 900

        result = truncate_to_limit(text, 450, SUFFIX)

        assert result == text[:430] + SUFFIX
        assert len(result) == 450

    def test_hard_cut_without_breaks(self):
        result = truncate_to_limit("x" * 1000, 100, SUFFIX)
        assert result == "x" * 80 + SUFFIX

    @pytest.mark.parametrize("length", [451, 600, 3000, 10000])
    def test_never_exceeds_limit(self, length):
        text = ("para " * 40 + "\n\n") * (length // 200 + 1)
        assert len(truncate_to_limit(text[:length], 450, SUFFIX)) <= 450

    def test_suffix_must_leave_room(self):
        with pytest.raises(ValueError):
            truncate_to_limit("x" * 100, 20, SUFFIX)


class TestReadMore:
    def test_article_url_uses_base(self):
        assert article_url("my-post", "https://blog.example.com/", "https://fb") == (
            "https://blog.example.com/blog/my-post"
        )

    def test_article_url_falls_back(self):
        assert article_url("my-post", None, "https://fb") == "https://fb"
        assert article_url(None, "https://blog.example.com", "https://fb") == "https://fb"

    def test_read_more_suffix(self):
        suffix = build_read_more("my-post", "https://blog.example.com", "https://fb")
        assert suffix == (
            f"\n\n{SEPARATOR}\n📖 Read the full article: https://blog.example.com/blog/my-post"
        )
