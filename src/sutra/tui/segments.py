"""Line segmentation for rendering.

A rendered line is a list of :class:`StyledSegment` objects: contiguous,
non-overlapping pieces of the (width-truncated) line, each tagged with a style
name. Search matches and the cursor are just extra boundaries fed to the same
segmenter; the widget's theme turns style names into ANSI codes.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from sutra.tui.highlight import SyntaxHighlighter
    from sutra.tui.search import SearchMatch

PLAIN = "plain"
MATCH = "match"
CURRENT_MATCH = "current_match"
CURSOR = "cursor"
CURSOR_MATCH = "cursor_match"

_FENCE_RE = re.compile(r"^`{3,}(\w*)$")


@dataclass(frozen=True)
class StyledSegment:
    text: str
    style: str = PLAIN


def truncate_line(line: str, width: int) -> str:
    """Cut *line* to *width* characters; lines never soft-wrap."""
    if width <= 0:
        return ""
    return line if len(line) <= width else line[:width]


def code_block_languages(lines: list[str]) -> list[str | None]:
    """Per-row language of the fenced code block each line sits in.

    Fence lines themselves map to ``None``; a fence without an info string
    opens a ``"text"`` block.
    """
    langs: list[str | None] = [None] * len(lines)
    in_block = False
    current: str | None = None

    for i, line in enumerate(lines):
        fence = _FENCE_RE.match(line)
        if fence:
            if not in_block:
                in_block = True
                current = fence.group(1) or "text"
            else:
                in_block = False
                current = None
            continue
        langs[i] = current if in_block else None

    return langs


def match_segments(
    text: str,
    start_col: int,
    matches: Sequence[SearchMatch],
    current: SearchMatch | None,
) -> list[StyledSegment]:
    """Split *text* (which begins at buffer column *start_col*) at match edges."""
    if not text:
        return []

    end_col = start_col + len(text)
    relevant = sorted(
        (m for m in matches if m.col < end_col and m.col + m.length > start_col),
        key=lambda m: m.col,
    )
    if not relevant:
        return [StyledSegment(text, PLAIN)]

    segments: list[StyledSegment] = []
    pos = 0
    for match in relevant:
        match_start = max(pos, match.col - start_col)
        match_end = min(len(text), match.col + match.length - start_col)
        if match_end <= match_start:
            continue
        if match_start > pos:
            segments.append(StyledSegment(text[pos:match_start], PLAIN))
        style = CURRENT_MATCH if match == current else MATCH
        segments.append(StyledSegment(text[match_start:match_end], style))
        pos = match_end

    if pos < len(text):
        segments.append(StyledSegment(text[pos:], PLAIN))
    return segments


def compose_line(
    line: str,
    row: int,
    width: int,
    matches: Sequence[SearchMatch] = (),
    current: SearchMatch | None = None,
    cursor_col: int | None = None,
    highlighter: SyntaxHighlighter | None = None,
    code_lang: str | None = None,
) -> list[StyledSegment]:
    """Build the styled segments for one visible line.

    *matches* are the search matches on this row. *cursor_col* is set only
    for the cursor's row. Plain rows go through *highlighter* when one is
    given; rows carrying matches or the cursor are segmented by match and
    cursor boundaries instead.
    """
    display = truncate_line(line, width)
    row_matches = [m for m in matches if m.col < len(display)]

    if cursor_col is None:
        if not row_matches:
            if highlighter is not None:
                return highlighter.highlight(display, row, code_lang)
            return [StyledSegment(display, PLAIN)]
        return match_segments(display, 0, row_matches, current)

    col = max(0, min(cursor_col, len(display)))
    glyph = display[col] if col < len(display) else " "
    on_match = any(m.contains(col) for m in row_matches)

    segments = match_segments(display[:col], 0, row_matches, current)
    segments.append(StyledSegment(glyph, CURSOR_MATCH if on_match else CURSOR))
    segments.extend(match_segments(display[col + 1 :], col + 1, row_matches, current))
    return segments
