"""Per-line markdown syntax highlighting for the text view.

The view shows markdown *source*, so highlighting never changes the text: it
only tags pieces of the line with style names. Block-level constructs
(headings, quotes, list markers, fences) are recognised per line; inline
emphasis, code spans and links come from ``markdown-it-py``'s inline parser.
Whenever the inline tokens cannot be mapped back onto the exact source text
(entities, escapes, normalised link targets) the line is left plain.
"""

from __future__ import annotations

import re
from typing import Protocol, runtime_checkable

from markdown_it import MarkdownIt
from markdown_it.token import Token

from sutra.tui.segments import PLAIN, StyledSegment

HEADING = "heading"
BOLD = "bold"
ITALIC = "italic"
STRIKETHROUGH = "strikethrough"
CODE = "code"
LINK = "link"
QUOTE = "quote"
LIST_MARKER = "list_marker"
MARKUP = "markup"
FENCE = "fence"

_FENCE_RE = re.compile(r"^`{3,}\w*$")
_HEADING_RE = re.compile(r"^#{1,6}(?:\s|$)")
_QUOTE_RE = re.compile(r"^(\s*>+ ?)(.*)$")
_LIST_RE = re.compile(r"^(\s*(?:[-*+]|\d+[.)]) )(.*)$")

_INLINE_STYLES: dict[str, str] = {
    "strong": BOLD,
    "em": ITALIC,
    "s": STRIKETHROUGH,
}

_md_parser = MarkdownIt("commonmark").enable("strikethrough")


@runtime_checkable
class SyntaxHighlighter(Protocol):
    """Styles a single display line.

    *code_lang* is the language of the fenced code block the line sits in,
    or ``None`` outside code blocks. The joined segment texts must equal
    *line*.
    """

    def highlight(self, line: str, row: int, code_lang: str | None) -> list[StyledSegment]: ...


class _Unmappable(Exception):
    """Inline tokens do not map one-to-one onto the source text."""


class MarkdownLineHighlighter:
    """Default :class:`SyntaxHighlighter` for markdown page and ticket bodies."""

    def highlight(self, line: str, row: int, code_lang: str | None) -> list[StyledSegment]:
        if not line:
            return [StyledSegment(line, PLAIN)]

        if _FENCE_RE.match(line):
            return [StyledSegment(line, FENCE)]
        if code_lang is not None:
            return [StyledSegment(line, CODE)]
        if _HEADING_RE.match(line):
            return [StyledSegment(line, HEADING)]

        quote = _QUOTE_RE.match(line)
        if quote:
            return [StyledSegment(quote.group(1), QUOTE), *self._inline(quote.group(2))]

        item = _LIST_RE.match(line)
        if item:
            return [StyledSegment(item.group(1), LIST_MARKER), *self._inline(item.group(2))]

        return self._inline(line)

    def _inline(self, text: str) -> list[StyledSegment]:
        if not text:
            return []
        try:
            segments = _segments_from_tokens(_inline_tokens(text))
        except _Unmappable:
            return [StyledSegment(text, PLAIN)]
        if "".join(s.text for s in segments) != text:
            return [StyledSegment(text, PLAIN)]
        return segments


def _inline_tokens(text: str) -> list[Token]:
    tokens = _md_parser.parseInline(text)
    if not tokens or tokens[0].children is None:
        return []
    return tokens[0].children


def _segments_from_tokens(children: list[Token]) -> list[StyledSegment]:
    segments: list[StyledSegment] = []
    styles: list[str] = []
    hrefs: list[str] = []

    def emit(text: str, style: str | None = None) -> None:
        if text:
            segments.append(StyledSegment(text, style or (styles[-1] if styles else PLAIN)))

    for tok in children:
        if tok.type == "text":
            emit(tok.content)
        elif tok.type == "html_inline":
            emit(tok.content, PLAIN)
        elif tok.type == "code_inline":
            emit(tok.markup, MARKUP)
            emit(tok.content, CODE)
            emit(tok.markup, MARKUP)
        elif tok.type.endswith("_open") and tok.tag and tok.type[:-5] in _INLINE_STYLES:
            emit(tok.markup, MARKUP)
            styles.append(_INLINE_STYLES[tok.type[:-5]])
        elif tok.type.endswith("_close") and tok.type[:-6] in _INLINE_STYLES:
            if styles:
                styles.pop()
            emit(tok.markup, MARKUP)
        elif tok.type == "link_open":
            if tok.markup == "autolink" or tok.attrGet("title"):
                raise _Unmappable(tok.type)
            hrefs.append(str(tok.attrGet("href") or ""))
            emit("[", MARKUP)
            styles.append(LINK)
        elif tok.type == "link_close":
            if styles:
                styles.pop()
            href = hrefs.pop() if hrefs else ""
            emit(f"]({href})", MARKUP)
        else:
            # softbreak, image, autolinks, entities
            raise _Unmappable(tok.type)

    return segments
