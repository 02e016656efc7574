"""SGR mouse reporting: terminal mode switching, stream parsing, hit-testing.

Mouse events arrive as ``ESC [ < button ; column ; row M`` (press) or
``... m`` (release) with 1-based coordinates. A single sequence may be split
across reads, so the parser keeps a residual buffer between chunks.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable

from sutra.tui.line_buffer import Cursor

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Wire constants
# ---------------------------------------------------------------------------

_MOUSE_TRACKING_ENABLE = "\x1b[?1000h"
_MOUSE_TRACKING_DISABLE = "\x1b[?1000l"
_SGR_COORDINATES_ENABLE = "\x1b[?1006h"
_SGR_COORDINATES_DISABLE = "\x1b[?1006l"

MOUSE_ENABLE = _MOUSE_TRACKING_ENABLE + _SGR_COORDINATES_ENABLE
MOUSE_DISABLE = _SGR_COORDINATES_DISABLE + _MOUSE_TRACKING_DISABLE

SGR_MOUSE_PREFIX = "\x1b[<"

BUTTON_PRIMARY = 0
BUTTON_WHEEL_UP = 64
BUTTON_WHEEL_DOWN = 65

_SGR_MOUSE_RE = re.compile(r"\x1b\[<(\d+);(\d+);(\d+)([Mm])")

# A trailing fragment that could still grow into a complete sequence
_SGR_PARTIAL_RE = re.compile(r"\x1b(?:\[(?:<[\d;]*)?)?$")

# Same, but a lone ESC is left alone: on its own it is the Escape key
_SGR_PREFIX_RE = re.compile(r"\x1b\[(?:<[\d;]*)?$")

# Residual buffer bound: past MAX with nothing decoded, keep only the tail
_RESIDUAL_MAX = 128
_RESIDUAL_KEEP = 32


@dataclass(frozen=True)
class MouseEvent:
    """A decoded mouse report with 0-based screen coordinates."""

    button: int
    x: int
    y: int
    pressed: bool

    @property
    def is_wheel(self) -> bool:
        return self.button in (BUTTON_WHEEL_UP, BUTTON_WHEEL_DOWN)


@dataclass(frozen=True)
class Geometry:
    """On-screen placement of the widget, used only for hit-testing.

    ``screen_top``/``screen_left`` locate the outer border; the text area
    starts one row below it and two columns to the right of it (border plus
    one column of padding).
    """

    screen_top: int = 0
    screen_left: int = 0
    content_height: int = 1
    content_width: int = 1

    BORDER_ROWS = 1
    BORDER_AND_PADDING_COLS = 2

    @property
    def content_top(self) -> int:
        return self.screen_top + self.BORDER_ROWS

    @property
    def content_left(self) -> int:
        return self.screen_left + self.BORDER_AND_PADDING_COLS

    def contains(self, x: int, y: int) -> bool:
        return (
            self.content_top <= y < self.content_top + self.content_height
            and self.content_left <= x < self.content_left + self.content_width
        )


# ---------------------------------------------------------------------------
# Stream parsing
# ---------------------------------------------------------------------------


def _event_from_match(m: re.Match[str]) -> MouseEvent:
    return MouseEvent(
        button=int(m.group(1)),
        x=int(m.group(2)) - 1,
        y=int(m.group(3)) - 1,
        pressed=m.group(4) == "M",
    )


def parse_mouse_events(buffer: str) -> tuple[list[MouseEvent], str]:
    """Extract every complete SGR mouse sequence from *buffer*.

    Returns ``(events, residual)``. Consumed text is dropped from the
    residual; if nothing could be decoded and the residual has grown past a
    small bound, only its tail is kept.
    """
    events: list[MouseEvent] = []
    consumed_until = 0

    for m in _SGR_MOUSE_RE.finditer(buffer):
        events.append(_event_from_match(m))
        consumed_until = m.end()

    if consumed_until > 0:
        return events, buffer[consumed_until:]

    if len(buffer) > _RESIDUAL_MAX:
        logger.debug("Dropping %d bytes of undecodable mouse input", len(buffer) - _RESIDUAL_KEEP)
        return events, buffer[-_RESIDUAL_KEEP:]

    return events, buffer


def split_mouse_input(buffer: str) -> tuple[list[MouseEvent | str], str]:
    """Separate SGR mouse reports from the other input in *buffer*.

    Returns ``(items, pending)``. *items* holds decoded events and the
    non-mouse text around them, in stream order. *pending* is a trailing
    ``ESC [`` or ``ESC [ <...`` fragment that may still grow into a report
    once the next read arrives. A lone trailing ESC is passed through as text.
    """
    if not is_mouse_input(buffer) and _SGR_PREFIX_RE.search(buffer) is None:
        return ([buffer] if buffer else []), ""

    items: list[MouseEvent | str] = []
    pos = 0
    for m in _SGR_MOUSE_RE.finditer(buffer):
        if m.start() > pos:
            items.append(buffer[pos : m.start()])
        items.append(_event_from_match(m))
        pos = m.end()

    tail = buffer[pos:]
    pending = ""
    partial = _SGR_PREFIX_RE.search(tail)
    if partial is not None:
        if len(tail) - partial.start() <= _RESIDUAL_MAX:
            pending = tail[partial.start() :]
            tail = tail[: partial.start()]
        else:
            logger.debug("Releasing %d bytes of unterminated mouse input", len(tail) - partial.start())
    if tail:
        items.append(tail)
    return items, pending


class MouseParser:
    """Incremental wrapper around :func:`parse_mouse_events`."""

    def __init__(self) -> None:
        self._buffer: str = ""

    def feed(self, data: str) -> list[MouseEvent]:
        events, self._buffer = parse_mouse_events(self._buffer + data)
        return events

    def split(self, data: str) -> list[MouseEvent | str]:
        """Like :meth:`feed`, but hand back the non-mouse text as well.

        Only an unfinished mouse report is kept between calls; everything
        else comes back as text, interleaved with the decoded events.
        """
        items, self._buffer = split_mouse_input(self._buffer + data)
        return items

    @property
    def pending(self) -> str:
        return self._buffer

    def has_partial_sequence(self) -> bool:
        """True when the buffered tail is an unfinished mouse sequence."""
        return bool(self._buffer) and _SGR_PARTIAL_RE.search(self._buffer) is not None

    def reset(self) -> None:
        self._buffer = ""


def is_mouse_input(data: str) -> bool:
    return SGR_MOUSE_PREFIX in data


# ---------------------------------------------------------------------------
# Terminal mode
# ---------------------------------------------------------------------------


class MouseReporting:
    """Turns SGR mouse reporting on and off through a terminal writer.

    Enabling twice or disabling while off writes nothing, so the terminal
    always sees exactly one enable followed by one disable.
    """

    def __init__(self, write: Callable[[str], None] | None = None) -> None:
        self._write = write
        self._enabled: bool = False

    @property
    def enabled(self) -> bool:
        return self._enabled

    def set_writer(self, write: Callable[[str], None] | None) -> None:
        self._write = write

    def enable(self) -> None:
        if self._enabled:
            return
        self._enabled = True
        logger.debug("Enabling SGR mouse reporting")
        if self._write is not None:
            self._write(MOUSE_ENABLE)

    def disable(self) -> None:
        if not self._enabled:
            return
        self._enabled = False
        logger.debug("Disabling SGR mouse reporting")
        if self._write is not None:
            self._write(MOUSE_DISABLE)


# ---------------------------------------------------------------------------
# Hit-testing
# ---------------------------------------------------------------------------


def hit_test(
    event: MouseEvent,
    geometry: Geometry,
    lines: list[str],
    scroll_top: int,
) -> Cursor | None:
    """Translate a click at screen coordinates into a buffer position.

    Clicks on the border, padding or below the last buffer line give ``None``.
    """
    if not geometry.contains(event.x, event.y):
        return None

    row = scroll_top + (event.y - geometry.content_top)
    if row < 0 or row >= len(lines):
        return None

    col = min(event.x - geometry.content_left, len(lines[row]))
    return Cursor(row, col)
