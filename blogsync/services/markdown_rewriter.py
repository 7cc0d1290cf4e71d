"""Rewrite markdown into LinkedIn-ready plain text.

LinkedIn renders post commentary as plain text, so markdown is flattened by an
ordered list of small rewrite rules. The ``styled`` rewriter fakes emphasis with
Unicode glyphs from :mod:`blogsync.services.styled_text`; the ``plain`` rewriter
only strips the markers.

Rule order matters: tables run before emphasis so header cells are bolded once,
and code is rendered first and parked out of band so later rules never see the
``*``/``_`` characters inside it.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass, field

from blogsync.services.styled_text import to_bold, to_italic, to_mono

QUOTE_PREFIX = "┃ "
SEPARATOR = "━" * 20
BULLET = "• "
TABLE_CELL_SEPARATOR = "  |  "

_PLACEHOLDER_RE = re.compile(r"\x00(\d+)\x00")


@dataclass(frozen=True)
class Emphasis:
    """Text transforms used for bold, italic and code spans."""

    bold: Callable[[str], str]
    italic: Callable[[str], str]
    mono: Callable[[str], str]


def _identity(text: str) -> str:
    return text


STYLED_EMPHASIS = Emphasis(bold=to_bold, italic=to_italic, mono=to_mono)
PLAIN_EMPHASIS = Emphasis(bold=_identity, italic=_identity, mono=_identity)


@dataclass
class RewriteState:
    """Per-call state shared by the rules."""

    emphasis: Emphasis
    protected: list[str] = field(default_factory=list)

    def protect(self, rendered: str) -> str:
        """Park rendered text and return a placeholder later rules cannot match."""
        self.protected.append(rendered)
        return f"\x00{len(self.protected) - 1}\x00"

    def restore(self, text: str) -> str:
        return _PLACEHOLDER_RE.sub(lambda m: self.protected[int(m.group(1))], text)


@dataclass(frozen=True)
class RewriteRule:
    name: str
    apply: Callable[[str, RewriteState], str]


def _sub(pattern: str, flags: int = 0) -> Callable[..., Callable[[str, RewriteState], str]]:
    """Build a rule body from a regex and a replacement taking (match, state)."""
    compiled = re.compile(pattern, flags)

    def decorator(replace: Callable[[re.Match[str], RewriteState], str]):
        def apply(text: str, state: RewriteState) -> str:
            return compiled.sub(lambda m: replace(m, state), text)

        apply.__name__ = replace.__name__
        apply.__doc__ = replace.__doc__
        return apply

    return decorator


@_sub(r"!\[[^\]]*\]\([^)]*\)")
def strip_images(match, state):
    return ""


@_sub(r"\[([^\]]+)\]\(([^)]+)\)")
def inline_links(match, state):
    return f"{match.group(1)} ({match.group(2)})"


_TABLE_SEPARATOR_ROW_RE = re.compile(r"^\s*\|[-:\s|]+\|\s*$")


def _table_cells(row: str) -> list[str]:
    return [cell.strip() for cell in row.split("|") if cell.strip()]


@_sub(r"^(?:[ \t]*\|[^\n]*\|[ \t]*(?:\n|\Z))+", re.MULTILINE)
def pipe_tables(match, state):
    """One line per row: bold header cells, plain body cells."""
    block = match.group(0)
    rows = [
        row
        for row in block.strip().split("\n")
        if row.strip() and not _TABLE_SEPARATOR_ROW_RE.match(row)
    ]
    trailing = "\n" if block.endswith("\n") else ""
    if not rows:
        return trailing

    lines = []
    header = _table_cells(rows[0])
    if header:
        lines.append(state.emphasis.bold(TABLE_CELL_SEPARATOR.join(header)))
    for row in rows[1:]:
        lines.append(TABLE_CELL_SEPARATOR.join(_table_cells(row)))
    return "\n".join(lines) + trailing


@_sub(r"```[^`\n]*\n(.*?)```", re.DOTALL)
def code_fences(match, state):
    lines = match.group(1).rstrip().split("\n")
    rendered = "\n".join("    " + state.emphasis.mono(line) for line in lines)
    return "\n" + state.protect(rendered) + "\n"


@_sub(r"`([^`\n]+)`")
def inline_code(match, state):
    return state.protect(state.emphasis.mono(match.group(1)))


@_sub(r"^#{1,6}[ \t]+(.+?)(?:[ \t]+#+)?[ \t]*$", re.MULTILINE)
def headings(match, state):
    return "\n" + state.emphasis.bold(match.group(1))


@_sub(r"\*\*\*(?!\s)([^*\n]+?)(?<!\s)\*\*\*|___(?!\s)([^_\n]+?)(?<!\s)___")
def bold_italic(match, state):
    inner = match.group(1) or match.group(2)
    return state.emphasis.bold(state.emphasis.italic(inner))


@_sub(r"\*\*(?!\s)([^*\n]+?)(?<!\s)\*\*|__(?!\s)([^_\n]+?)(?<!\s)__")
def bold(match, state):
    return state.emphasis.bold(match.group(1) or match.group(2))


@_sub(
    r"(?<!\*)\*(?![\s*])([^*\n]+?)(?<![\s*])\*(?!\*)"
    r"|(?<![\w_])_(?![\s_])([^_\n]+?)(?<![\s_])_(?![\w_])"
)
def italic(match, state):
    return state.emphasis.italic(match.group(1) or match.group(2))


@_sub(r"^>[ \t]+(.+)$", re.MULTILINE)
def block_quotes(match, state):
    return QUOTE_PREFIX + match.group(1)


@_sub(r"^-{3,}[ \t]*$", re.MULTILINE)
def horizontal_rules(match, state):
    return SEPARATOR


@_sub(r"^([ \t]*)[-*+][ \t]+", re.MULTILINE)
def bullet_lists(match, state):
    return match.group(1) + BULLET


@_sub(r"^([ \t]*)(\d+)\.[ \t]+", re.MULTILINE)
def numbered_lists(match, state):
    return f"{match.group(1)}{match.group(2)}. "


@_sub(r"\n{3,}")
def collapse_blank_lines(match, state):
    return "\n\n"


DEFAULT_RULES: tuple[RewriteRule, ...] = tuple(
    RewriteRule(fn.__name__, fn)
    for fn in (
        strip_images,
        inline_links,
        pipe_tables,
        code_fences,
        inline_code,
        headings,
        bold_italic,
        bold,
        italic,
        block_quotes,
        horizontal_rules,
        bullet_lists,
        numbered_lists,
        collapse_blank_lines,
    )
)


class MarkdownRewriter:
    """Apply the rewrite rules in order with a given emphasis strategy."""

    def __init__(
        self,
        name: str,
        emphasis: Emphasis,
        rules: tuple[RewriteRule, ...] = DEFAULT_RULES,
    ) -> None:
        self.name = name
        self.emphasis = emphasis
        self.rules = rules

    def rewrite(self, markdown: str | None) -> str:
        if not markdown:
            return ""

        state = RewriteState(emphasis=self.emphasis)
        text = markdown.replace("\r\n", "\n").replace("\x00", "")
        for rule in self.rules:
            text = rule.apply(text, state)
        return state.restore(text).strip()

    def __repr__(self) -> str:
        return f"MarkdownRewriter(name={self.name!r})"


_REWRITERS = {
    "styled": MarkdownRewriter("styled", STYLED_EMPHASIS),
    "plain": MarkdownRewriter("plain", PLAIN_EMPHASIS),
}


def get_markdown_rewriter(name: str = "styled") -> MarkdownRewriter:
    """Return the rewriter registered under ``name`` (``styled`` or ``plain``)."""
    try:
        return _REWRITERS[name.strip().lower()]
    except KeyError:
        raise ValueError(f"Unknown markdown rewriter: {name}") from None


def markdown_to_linkedin(markdown: str | None) -> str:
    """Rewrite markdown with the styled rewriter."""
    return _REWRITERS["styled"].rewrite(markdown)
