"""Tests for sutra.tui.highlight -- per-line markdown highlighting."""

from __future__ import annotations

import pytest

from sutra.tui.highlight import (
    BOLD,
    CODE,
    FENCE,
    HEADING,
    ITALIC,
    LINK,
    LIST_MARKER,
    MARKUP,
    QUOTE,
    STRIKETHROUGH,
    MarkdownLineHighlighter,
    SyntaxHighlighter,
)
from sutra.tui.segments import PLAIN, StyledSegment


@pytest.fixture
def highlighter() -> MarkdownLineHighlighter:
    return MarkdownLineHighlighter()


def _pairs(segments: list[StyledSegment]) -> list[tuple[str, str]]:
    return [(s.text, s.style) for s in segments]


class TestBlockConstructs:
    def test_satisfies_protocol(self, highlighter: MarkdownLineHighlighter) -> None:
        assert isinstance(highlighter, SyntaxHighlighter)

    def test_heading(self, highlighter: MarkdownLineHighlighter) -> None:
        assert _pairs(highlighter.highlight("## Notes", 0, None)) == [("## Notes", HEADING)]

    def test_hash_without_space_is_not_heading(self, highlighter: MarkdownLineHighlighter) -> None:
        assert _pairs(highlighter.highlight("#tag", 0, None)) == [("#tag", PLAIN)]

    def test_fence_line(self, highlighter: MarkdownLineHighlighter) -> None:
        assert _pairs(highlighter.highlight("```python", 0, None)) == [("```python", FENCE)]

    def test_line_inside_code_block(self, highlighter: MarkdownLineHighlighter) -> None:
        assert _pairs(highlighter.highlight("x = **1**", 3, "python")) == [("x = **1**", CODE)]

    def test_quote(self, highlighter: MarkdownLineHighlighter) -> None:
        assert _pairs(highlighter.highlight("> quoted", 0, None)) == [("> ", QUOTE), ("quoted", PLAIN)]

    def test_list_item(self, highlighter: MarkdownLineHighlighter) -> None:
        assert _pairs(highlighter.highlight("- item", 0, None)) == [("- ", LIST_MARKER), ("item", PLAIN)]

    def test_ordered_list_item(self, highlighter: MarkdownLineHighlighter) -> None:
        segments = highlighter.highlight("12. step", 0, None)
        assert segments[0] == StyledSegment("12. ", LIST_MARKER)

    def test_empty_line(self, highlighter: MarkdownLineHighlighter) -> None:
        assert _pairs(highlighter.highlight("", 0, None)) == [("", PLAIN)]


class TestInlineConstructs:
    def test_bold(self, highlighter: MarkdownLineHighlighter) -> None:
        assert _pairs(highlighter.highlight("some **bold** text", 0, None)) == [
            ("some ", PLAIN),
            ("**", MARKUP),
            ("bold", BOLD),
            ("**", MARKUP),
            (" text", PLAIN),
        ]

    def test_italic(self, highlighter: MarkdownLineHighlighter) -> None:
        assert _pairs(highlighter.highlight("*soft*", 0, None)) == [
            ("*", MARKUP),
            ("soft", ITALIC),
            ("*", MARKUP),
        ]

    def test_strikethrough(self, highlighter: MarkdownLineHighlighter) -> None:
        assert _pairs(highlighter.highlight("~~gone~~", 0, None)) == [
            ("~~", MARKUP),
            ("gone", STRIKETHROUGH),
            ("~~", MARKUP),
        ]

    def test_code_span(self, highlighter: MarkdownLineHighlighter) -> None:
        assert _pairs(highlighter.highlight("run `make`", 0, None)) == [
            ("run ", PLAIN),
            ("`", MARKUP),
            ("make", CODE),
            ("`", MARKUP),
        ]

    def test_link(self, highlighter: MarkdownLineHighlighter) -> None:
        assert _pairs(highlighter.highlight("[docs](https://example.com)", 0, None)) == [
            ("[", MARKUP),
            ("docs", LINK),
            ("](https://example.com)", MARKUP),
        ]

    def test_list_item_with_inline_markup(self, highlighter: MarkdownLineHighlighter) -> None:
        segments = highlighter.highlight("* **done**", 0, None)
        assert segments[0] == StyledSegment("* ", LIST_MARKER)
        assert StyledSegment("done", BOLD) in segments


class TestFallback:
    @pytest.mark.parametrize(
        "line",
        [
            "fish &amp; chips",
            r"not \*emphasis\*",
            "<https://example.com>",
            "![alt](img.png)",
        ],
    )
    def test_unmappable_lines_stay_plain(self, highlighter: MarkdownLineHighlighter, line: str) -> None:
        assert _pairs(highlighter.highlight(line, 0, None)) == [(line, PLAIN)]

    @pytest.mark.parametrize(
        "line",
        ["a **b** c", "plain text", "> *q*", "- [x](y)", "mixed `code` and ~~s~~"],
    )
    def test_segments_always_reassemble_source(self, highlighter: MarkdownLineHighlighter, line: str) -> None:
        assert "".join(s.text for s in highlighter.highlight(line, 0, None)) == line
