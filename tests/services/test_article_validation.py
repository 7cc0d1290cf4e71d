"""Tests for the dev.to article quality gate."""

import pytest

from blogsync.models.contracts import RejectionReason
from blogsync.services.article_validation import get_plain_text, validate_article

GOOD_BODY = "Concurrency in Go relies on goroutines and channels to share work. " * 4


class TestValidateArticle:
    def test_accepts_good_article(self):
        result = validate_article("Understanding Goroutines", GOOD_BODY)
        assert result.accepted is True
        assert result.reason is None

    def test_image_only_body_is_too_short(self):
        body = "![screenshot](https://example.com/shot.png)\n" * 20
        result = validate_article("Screenshots", body)
        assert result.accepted is False
        assert result.reason == RejectionReason.TOO_SHORT

    def test_code_only_body_is_too_short(self):
        body = "```python\n" + "value = compute(1, 2)\n" * 50 + "```"
        result = validate_article("Snippets", body)
        assert result.reason == RejectionReason.TOO_SHORT

    def test_symbol_heavy_body_is_low_density(self):
        body = "x " + "@#$% " * 50
        result = validate_article("Symbols", body)
        assert result.reason == RejectionReason.LOW_DENSITY

    def test_first_person_title_rejected_regardless_of_body(self):
        result = validate_article("I built a thing", GOOD_BODY)
        assert result.accepted is False
        assert result.reason == RejectionReason.FIRST_PERSON_TITLE

    def test_too_short_wins_over_first_person(self):
        result = validate_article("My notes", "tiny")
        assert result.reason == RejectionReason.TOO_SHORT

    @pytest.mark.parametrize(
        "title",
        ["My favorite tools", "We're hiring", "Why our team moved", "I'm done with YAML"],
    )
    def test_first_person_variants(self, title):
        assert validate_article(title, GOOD_BODY).reason == RejectionReason.FIRST_PERSON_TITLE

    @pytest.mark.parametrize(
        "title",
        [
            "Iterators in Rust",
            "Mythology of code",
            "Building an API",
            "Handling I/O in Rust",
            "Rust Ownership, Part I",
            "I-frames in H.264 video",
        ],
    )
    def test_pronouns_need_a_following_word(self, title):
        assert validate_article(title, GOOD_BODY).accepted is True


class TestPlainText:
    def test_strips_markup(self):
        markdown = (
            "Read [the docs](https://d.example) or https://raw.example/x "
            "<b>now</b> {% embed https://x %} `inline`"
        )
        assert get_plain_text(markdown) == "Read  or  now"
