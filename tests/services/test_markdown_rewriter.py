"""Tests for the markdown to LinkedIn text rewriter."""

import pytest

from blogsync.services.markdown_rewriter import (
    BULLET,
    QUOTE_PREFIX,
    SEPARATOR,
    get_markdown_rewriter,
    markdown_to_linkedin,
)
from blogsync.services.styled_text import to_bold, to_italic, to_mono


@pytest.fixture
def plain():
    return get_markdown_rewriter("plain")


class TestStyledRewriter:
    def test_mixed_emphasis(self):
        result = markdown_to_linkedin("**bold** and *italic* and `code`")
        assert result == f"{to_bold('bold')} and {to_italic('italic')} and {to_mono('code')}"

    def test_empty_input(self):
        assert markdown_to_linkedin("") == ""
        assert markdown_to_linkedin(None) == ""

    def test_images_removed(self):
        assert markdown_to_linkedin("Look ![diagram](https://x/y.png) here") == "Look  here"

    def test_links_keep_text_and_url(self):
        assert markdown_to_linkedin("[docs](https://docs.example.com)") == (
            "docs (https://docs.example.com)"
        )

    def test_heading_becomes_bold_line(self):
        result = markdown_to_linkedin("Intro\n## Getting Started\nBody")
        assert result == f"Intro\n\n{to_bold('Getting Started')}\nBody"

    def test_heading_keeps_trailing_hash_in_word(self):
        assert markdown_to_linkedin("# Learning C#") == to_bold("Learning C#")

    def test_bold_italic(self):
        assert markdown_to_linkedin("***wow***") == to_bold(to_italic("wow"))
        assert markdown_to_linkedin("___wow___") == to_bold(to_italic("wow"))

    def test_underscore_bold(self):
        assert markdown_to_linkedin("__strong__") == to_bold("strong")

    def test_underscores_inside_words_are_not_emphasis(self):
        assert markdown_to_linkedin("call snake_case_name now") == "call snake_case_name now"

    def test_code_fence(self):
        result = markdown_to_linkedin("Before\n```python\nx = 1\n```\nAfter")
        assert result == f"Before\n\n    {to_mono('x = 1')}\n\nAfter"

    def test_code_fence_with_info_attributes(self):
        result = markdown_to_linkedin('Setup:\n```js title="app.js"\nconst a = 1;\n```')
        assert result == f"Setup:\n\n    {to_mono('const a = 1;')}"
        assert "```" not in result

    def test_code_contents_not_emphasized(self):
        assert markdown_to_linkedin("`**raw**`") == to_mono("**raw**")

    def test_block_quote(self):
        assert markdown_to_linkedin("> wise words") == f"{QUOTE_PREFIX}wise words"

    def test_horizontal_rule(self):
        assert markdown_to_linkedin("a\n\n---\n\nb") == f"a\n\n{SEPARATOR}\n\nb"

    def test_bullets(self):
        assert markdown_to_linkedin("- one\n* two\n+ three") == (
            f"{BULLET}one\n{BULLET}two\n{BULLET}three"
        )

    def test_numbered_list_spacing(self):
        assert markdown_to_linkedin("1.   first\n2. second") == "1. first\n2. second"

    def test_table(self):
        markdown = "| Name | Age |\n|------|-----|\n| Ann | 30 |\n| Bob | 25 |\n"
        assert markdown_to_linkedin(markdown) == "\n".join(
            [to_bold("Name  |  Age"), "Ann  |  30", "Bob  |  25"]
        )

    def test_blank_lines_collapsed(self):
        assert markdown_to_linkedin("a\n\n\n\n\nb") == "a\n\nb"


class TestPlainRewriter:
    def test_markers_stripped_without_glyphs(self, plain):
        assert plain.rewrite("**bold** and *italic* and `code`") == "bold and italic and code"

    def test_heading(self, plain):
        assert plain.rewrite("# Title") == "Title"


class TestRegistry:
    def test_names(self):
        assert get_markdown_rewriter("styled").name == "styled"
        assert get_markdown_rewriter(" PLAIN ").name == "plain"

    def test_unknown_name(self):
        with pytest.raises(ValueError):
            get_markdown_rewriter("html")
