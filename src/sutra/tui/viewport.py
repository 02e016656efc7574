"""Cursor motion and viewport scrolling for the text view.

All functions are pure: they take the current lines, cursor and
:class:`Viewport` and return updated copies. The manual-scroll grace period
is a "suppressed until" timestamp compared against a caller-supplied clock
reading, so nothing here depends on real timers.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Literal

from sutra.tui.line_buffer import Cursor

Direction = Literal["up", "down", "left", "right", "home", "end"]


@dataclass(frozen=True)
class Viewport:
    """Vertical window over the buffer."""

    scroll_top: int = 0
    height: int = 1
    # Clock reading until which auto-scroll-to-cursor is suppressed
    manual_scroll_until: float = 0.0

    def is_manual_scroll(self, now: float) -> bool:
        return now < self.manual_scroll_until

    def visible_rows(self, line_count: int) -> range:
        return range(self.scroll_top, min(line_count, self.scroll_top + self.height))


def max_scroll(line_count: int, height: int) -> int:
    return max(0, line_count - height)


def clamp_scroll(viewport: Viewport, line_count: int) -> Viewport:
    top = max(0, min(viewport.scroll_top, max_scroll(line_count, viewport.height)))
    if top == viewport.scroll_top:
        return viewport
    return replace(viewport, scroll_top=top)


def clamp_cursor(lines: list[str], cursor: Cursor) -> Cursor:
    """Pull *cursor* back inside the buffer after the content changed."""
    row = max(0, min(cursor.row, len(lines) - 1))
    line = lines[row] if lines else ""
    col = max(0, min(cursor.col, len(line)))
    if row == cursor.row and col == cursor.col:
        return cursor
    return Cursor(row, col)


def move_cursor(lines: list[str], cursor: Cursor, direction: Direction) -> Cursor:
    """Move the cursor one step in *direction*.

    Left/right wrap across line boundaries; up/down clamp the column to the
    target line's length.
    """
    if not lines:
        return Cursor(0, 0)

    row, col = cursor.row, cursor.col
    last_row = len(lines) - 1

    if direction == "up":
        target = max(0, row - 1)
        return Cursor(target, min(col, len(lines[target])))

    if direction == "down":
        target = min(last_row, row + 1)
        return Cursor(target, min(col, len(lines[target])))

    if direction == "left":
        if col > 0:
            return Cursor(row, col - 1)
        if row > 0:
            return Cursor(row - 1, len(lines[row - 1]))
        return cursor

    if direction == "right":
        if col < len(lines[row]):
            return Cursor(row, col + 1)
        if row < last_row:
            return Cursor(row + 1, 0)
        return cursor

    if direction == "home":
        return Cursor(row, 0)

    if direction == "end":
        return Cursor(row, len(lines[row]))

    return cursor


def page(
    lines: list[str],
    cursor: Cursor,
    viewport: Viewport,
    direction: int,
) -> tuple[Cursor, Viewport]:
    """Page up (``direction=-1``) or down (``direction=1``).

    The row moves by a full viewport height with the column reset to 0, and
    the scroll offset moves by the same amount. Both are clamped.
    """
    step = viewport.height * direction
    row = max(0, min(len(lines) - 1, cursor.row + step))
    top = max(0, min(max_scroll(len(lines), viewport.height), viewport.scroll_top + step))
    return Cursor(row, 0), replace(viewport, scroll_top=top)


def ensure_visible(
    cursor: Cursor,
    viewport: Viewport,
    line_count: int,
    now: float,
) -> Viewport:
    """Scroll just enough to bring the cursor row into view.

    Does nothing while the manual-scroll grace period is running.
    """
    if viewport.is_manual_scroll(now):
        return viewport

    top = viewport.scroll_top
    if cursor.row < top:
        top = cursor.row
    elif cursor.row >= top + viewport.height:
        top = min(max_scroll(line_count, viewport.height), cursor.row - viewport.height + 1)

    if top == viewport.scroll_top:
        return viewport
    return replace(viewport, scroll_top=top)


def scroll_by(
    viewport: Viewport,
    delta: int,
    line_count: int,
    now: float,
    grace: float,
) -> Viewport:
    """Scroll by *delta* lines on behalf of the user (mouse wheel).

    The grace period is (re)started even when the offset is already clamped.
    """
    top = max(0, min(max_scroll(line_count, viewport.height), viewport.scroll_top + delta))
    return replace(viewport, scroll_top=top, manual_scroll_until=now + grace)


def center_on_row(row: int, viewport: Viewport, line_count: int) -> Viewport:
    """Scroll so *row* is visible, centring it when it was below the window."""
    top = viewport.scroll_top
    if row < top:
        top = row
    elif row >= top + viewport.height:
        top = min(max_scroll(line_count, viewport.height), max(0, row - viewport.height // 2))

    if top == viewport.scroll_top:
        return viewport
    return replace(viewport, scroll_top=top)
