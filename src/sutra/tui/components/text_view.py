"""Scrollable multi-line text view with editing, search and mouse support.

Backs every read and edit surface of the client (ticket descriptions,
comments, page bodies). The host owns the text: it passes the full content in
with :meth:`TextView.set_content` and receives the full new content through
``on_change`` after every edit.

Each input event is handled as one reducer step: the pure functions in
:mod:`sutra.tui.line_buffer`, :mod:`sutra.tui.viewport` and
:mod:`sutra.tui.search` turn the current buffer, cursor, viewport and search
state into the next one, and the view keeps only the latest result.
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass, field, replace
from typing import Callable

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
from sutra.tui.keybindings import (
    TextViewAction,
    TextViewKeybindingsManager,
    get_text_view_keybindings,
)
from sutra.tui.keys import is_printable_input
from sutra.tui.line_buffer import (
    Cursor,
    delete_backward,
    insert_char,
    insert_text,
    join,
    split,
    split_line,
)
from sutra.tui.mouse import (
    BUTTON_PRIMARY,
    BUTTON_WHEEL_DOWN,
    BUTTON_WHEEL_UP,
    Geometry,
    MouseEvent,
    MouseParser,
    MouseReporting,
    hit_test,
)
from sutra.tui.search import (
    SearchMatch,
    SearchState,
    find_matches,
    jump_to_nearest,
    matches_on_row,
    next_match,
    previous_match,
)
from sutra.tui.segments import (
    CURRENT_MATCH,
    CURSOR,
    CURSOR_MATCH,
    MATCH,
    code_block_languages,
    compose_line,
)
from sutra.tui.utils import truncate_to_width
from sutra.tui.viewport import (
    Direction,
    Viewport,
    center_on_row,
    clamp_cursor,
    clamp_scroll,
    ensure_visible,
    max_scroll,
    move_cursor,
    page,
    scroll_by,
)

logger = logging.getLogger(__name__)

BRACKETED_PASTE_START = "\x1b[200~"
BRACKETED_PASTE_END = "\x1b[201~"

# Rows taken by the frame: top border, status row, bottom border
_CHROME_ROWS = 3
# Columns taken by the frame: two borders plus one column of padding each side
_CHROME_COLS = 4

_MOTIONS: tuple[tuple[TextViewAction, Direction], ...] = (
    ("cursorUp", "up"),
    ("cursorDown", "down"),
    ("cursorLeft", "left"),
    ("cursorRight", "right"),
    ("cursorLineStart", "home"),
    ("cursorLineEnd", "end"),
)


# ---------------------------------------------------------------------------
# Options / theme
# ---------------------------------------------------------------------------


def _sgr(open_code: str) -> Callable[[str], str]:
    def apply(text: str) -> str:
        return f"\x1b[{open_code}m{text}\x1b[0m" if text else text

    return apply


def _identity(text: str) -> str:
    return text


def _default_styles() -> dict[str, Callable[[str], str]]:
    return {
        MATCH: _sgr("30;103"),
        CURRENT_MATCH: _sgr("30;43"),
        CURSOR: _sgr("30;47"),
        CURSOR_MATCH: _sgr("30;46"),
        HEADING: _sgr("1;36"),
        BOLD: _sgr("1"),
        ITALIC: _sgr("3"),
        STRIKETHROUGH: _sgr("9"),
        CODE: _sgr("33"),
        LINK: _sgr("4;34"),
        QUOTE: _sgr("2"),
        LIST_MARKER: _sgr("36"),
        MARKUP: _sgr("2"),
        FENCE: _sgr("2"),
    }


@dataclass
class TextViewTheme:
    """Styling callables. Unknown segment styles render unstyled."""

    border_color: Callable[[str], str] = field(default=_sgr("36"))
    search_border_color: Callable[[str], str] = field(default=_sgr("33"))
    status: Callable[[str], str] = field(default=_sgr("2"))
    hint_key: Callable[[str], str] = field(default=_sgr("30;44"))
    search_label: Callable[[str], str] = field(default=_sgr("33"))
    search_caret: Callable[[str], str] = field(default=_sgr("30;43"))
    no_matches: Callable[[str], str] = field(default=_sgr("31"))
    styles: dict[str, Callable[[str], str]] = field(default_factory=_default_styles)

    def style(self, name: str) -> Callable[[str], str]:
        return self.styles.get(name, _identity)


@dataclass
class TextViewOptions:
    # Outer height including border and status row
    height: int = 15
    syntax_highlight: bool = False
    read_only: bool = False
    # Lines scrolled per wheel notch
    wheel_step: int = 2
    # Seconds auto-scroll stays suppressed after a wheel scroll or click
    manual_scroll_grace: float = 0.5


# ---------------------------------------------------------------------------
# TextView
# ---------------------------------------------------------------------------


class TextView:
    """Text viewport widget implementing the component interface.

    ``render(width)`` returns the framed lines to draw; ``handle_input(data)``
    consumes raw terminal input, keys and SGR mouse reports alike.
    """

    def __init__(
        self,
        content: str = "",
        options: TextViewOptions | None = None,
        *,
        theme: TextViewTheme | None = None,
        keybindings: TextViewKeybindingsManager | None = None,
        write: Callable[[str], None] | None = None,
        highlighter: SyntaxHighlighter | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if options is None:
            options = TextViewOptions()

        self._height: int = max(_CHROME_ROWS + 1, int(options.height))
        self._wheel_step: int = max(1, int(options.wheel_step))
        grace = options.manual_scroll_grace
        self._scroll_grace: float = grace if math.isfinite(grace) and grace > 0 else 0.0
        self.read_only: bool = options.read_only

        self._theme = theme or TextViewTheme()
        self._keybindings = keybindings
        if highlighter is None and options.syntax_highlight:
            highlighter = MarkdownLineHighlighter()
        self._highlighter = highlighter
        self._clock = clock

        self._mouse = MouseReporting(write)
        self._mouse_parser = MouseParser()

        self._lines: list[str] = split(content)
        self._code_langs: list[str | None] = self._compute_code_langs()
        self._cursor = Cursor()
        self._viewport = Viewport(scroll_top=0, height=self._height - _CHROME_ROWS)
        self._search = SearchState()

        self._screen_top: int = 0
        self._screen_left: int = 0
        self._last_width: int = 80
        self._active: bool = False
        self.focused: bool = False

        # Public callbacks
        self.on_change: Callable[[str], None] | None = None
        self.on_save: Callable[[], None] | None = None
        self.on_open_external_editor: Callable[[], None] | None = None
        self.on_request_writable: Callable[[], None] | None = None

    # -- Content -------------------------------------------------------------

    def get_content(self) -> str:
        return join(self._lines)

    def get_lines(self) -> list[str]:
        return list(self._lines)

    def set_content(self, content: str) -> None:
        """Replace the buffer with the host's current text.

        The cursor and scroll offset are clamped into the new buffer and an
        active search is re-run against it.
        """
        if content == join(self._lines):
            return
        self._lines = split(content)
        self._code_langs = self._compute_code_langs()
        self._cursor = clamp_cursor(self._lines, self._cursor)
        self._viewport = clamp_scroll(self._viewport, len(self._lines))
        if self._search.active:
            self._set_query(self._search.query)
        self._settle()

    def _compute_code_langs(self) -> list[str | None]:
        if self._highlighter is None:
            return []
        return code_block_languages(self._lines)

    # -- State accessors -----------------------------------------------------

    def get_cursor(self) -> Cursor:
        return self._cursor

    @property
    def viewport(self) -> Viewport:
        return self._viewport

    @property
    def scroll_top(self) -> int:
        return self._viewport.scroll_top

    @property
    def search_state(self) -> SearchState:
        return self._search

    @property
    def is_searching(self) -> bool:
        return self._search.active

    @property
    def height(self) -> int:
        return self._height

    @property
    def content_width(self) -> int:
        return max(1, self._last_width - _CHROME_COLS)

    # -- Geometry ------------------------------------------------------------

    def set_position(self, screen_top: int, screen_left: int) -> None:
        """Record where the host laid the widget out (0-based screen cells)."""
        self._screen_top = max(0, screen_top)
        self._screen_left = max(0, screen_left)

    @property
    def geometry(self) -> Geometry:
        return Geometry(
            screen_top=self._screen_top,
            screen_left=self._screen_left,
            content_height=self._viewport.height,
            content_width=self.content_width,
        )

    # -- Activation ----------------------------------------------------------

    @property
    def is_active(self) -> bool:
        return self._active

    @property
    def mouse_enabled(self) -> bool:
        return self._mouse.enabled

    def set_writer(self, write: Callable[[str], None] | None) -> None:
        self._mouse.set_writer(write)

    def activate(self) -> None:
        """Start accepting input and turn terminal mouse reporting on."""
        self._active = True
        self._mouse.enable()

    def deactivate(self) -> None:
        """Stop accepting input, release the mouse and drop search state."""
        self._active = False
        self._mouse.disable()
        self._mouse_parser.reset()
        self._search = SearchState()

    def set_read_only(self, read_only: bool) -> None:
        self.read_only = read_only

    # -- Component interface -------------------------------------------------

    def invalidate(self) -> None:
        """No cached state to invalidate currently."""

    def handle_input(self, data: str) -> None:
        if not self._active or not data:
            return

        # Mouse reports may share a read with keys or be split across reads
        for item in self._mouse_parser.split(data):
            if isinstance(item, MouseEvent):
                self._handle_mouse(item)
            elif self._search.active:
                self._handle_search_input(item)
            else:
                self._handle_normal_input(item)

        self._settle()

    def render(self, width: int) -> list[str]:
        width = max(_CHROME_COLS + 1, width)
        self._last_width = width
        content_width = self.content_width

        border = self._theme.search_border_color if self._search.active else self._theme.border_color
        side = border("│")
        horizontal = "─" * (width - 2)

        result = [border(f"╭{horizontal}╮")]

        current = self._search.current_match
        for row in range(self.scroll_top, self.scroll_top + self._viewport.height):
            if row < len(self._lines):
                text, used = self._render_row(row, content_width, current)
            else:
                text, used = "", 0
            padding = " " * max(0, content_width - used)
            # A cursor past the last character may spill into the right padding
            right = " " if used <= content_width else ""
            result.append(f"{side} {text}{padding}{right}{side}")

        status = truncate_to_width(self._status_line(), content_width, pad=True)
        result.append(f"{side} {status} {side}")
        result.append(border(f"╰{horizontal}╯"))
        return result

    def _render_row(self, row: int, width: int, current: SearchMatch | None) -> tuple[str, int]:
        code_lang = self._code_langs[row] if row < len(self._code_langs) else None
        segments = compose_line(
            self._lines[row],
            row,
            width,
            matches_on_row(self._search.matches, row),
            current,
            self._cursor.col if row == self._cursor.row else None,
            self._highlighter,
            code_lang,
        )
        text = "".join(self._theme.style(s.style)(s.text) for s in segments)
        return text, sum(len(s.text) for s in segments)

    def _status_line(self) -> str:
        theme = self._theme

        def hint(key: str, label: str) -> str:
            return theme.hint_key(f" {key} ") + theme.status(f" {label}")

        if self._search.active:
            parts = [theme.search_label("Find: "), self._search.query, theme.search_caret(" ")]
            if self._search.matches:
                parts.append(theme.status(f" ({self._search.current_index + 1}/{len(self._search.matches)})"))
            elif self._search.query:
                parts.append(theme.no_matches(" No matches"))
            parts.append(theme.status(" | "))
            parts.append(hint("Enter", "Jump | "))
            parts.append(hint("↑/↓", "Navigate | "))
            parts.append(hint("Esc", "Cancel"))
            return "".join(parts)

        total = len(self._lines)
        limit = max_scroll(total, self._viewport.height)
        percent = 100 if limit == 0 else math.floor(self.scroll_top / limit * 100 + 0.5)
        read_only = "Read-only | " if self.read_only else ""
        position = theme.status(
            f"Ln {self._cursor.row + 1}, Col {self._cursor.col + 1} | "
            f"{total} lines | {percent}% | {read_only}"
        )
        return position + hint("Ctrl+S", "Save | ") + hint("Ctrl+F or /", "Find")

    # -- Keyboard: normal mode -----------------------------------------------

    def _kb(self) -> TextViewKeybindingsManager:
        return self._keybindings or get_text_view_keybindings()

    def _handle_normal_input(self, data: str) -> None:  # noqa: C901
        kb = self._kb()

        if kb.matches(data, "openExternalEditor"):
            if self.on_open_external_editor:
                self.on_open_external_editor()
            return
        if kb.matches(data, "searchStart"):
            self._start_search()
            return
        if kb.matches(data, "save"):
            if self.on_save:
                self.on_save()
            return

        for action, direction in _MOTIONS:
            if kb.matches(data, action):
                self._cursor = move_cursor(self._lines, self._cursor, direction)
                return
        if kb.matches(data, "pageUp"):
            self._cursor, self._viewport = page(self._lines, self._cursor, self._viewport, -1)
            return
        if kb.matches(data, "pageDown"):
            self._cursor, self._viewport = page(self._lines, self._cursor, self._viewport, 1)
            return

        is_paste = data.startswith(BRACKETED_PASTE_START)
        is_backspace = kb.matches(data, "deleteCharBackward")
        is_enter = kb.matches(data, "newLine")
        is_text = is_printable_input(data)
        if not (is_paste or is_backspace or is_enter or is_text):
            return

        if self.read_only:
            logger.debug("Edit attempted on read-only text view")
            if self.on_request_writable:
                self.on_request_writable()
            return

        if is_paste:
            pasted = data[len(BRACKETED_PASTE_START) :]
            end = pasted.find(BRACKETED_PASTE_END)
            if end != -1:
                pasted = pasted[:end]
            if not pasted:
                return
            self._apply_edit(*insert_text(self._lines, self._cursor, pasted))
        elif is_backspace:
            self._apply_edit(*delete_backward(self._lines, self._cursor))
        elif is_enter:
            self._apply_edit(*split_line(self._lines, self._cursor))
        else:
            self._apply_edit(*insert_char(self._lines, self._cursor, data))

    def _apply_edit(self, lines: list[str], cursor: Cursor) -> None:
        if lines == self._lines:
            return
        self._lines = lines
        self._cursor = clamp_cursor(lines, cursor)
        self._code_langs = self._compute_code_langs()
        self._viewport = clamp_scroll(self._viewport, len(lines))
        if self.on_change:
            self.on_change(join(lines))

    # -- Keyboard: search mode -----------------------------------------------

    def _start_search(self) -> None:
        logger.debug("Entering search mode")
        self._search = SearchState(active=True)

    def _handle_search_input(self, data: str) -> None:
        kb = self._kb()

        if kb.matches(data, "searchCancel"):
            logger.debug("Search cancelled")
            self._search = SearchState()
            return
        if kb.matches(data, "searchConfirm"):
            current = self._search.current_match
            if current is not None:
                self._jump_to(current)
            logger.debug("Search confirmed with %d matches", len(self._search.matches))
            self._search = SearchState()
            return
        if kb.matches(data, "deleteCharBackward"):
            self._set_query(self._search.query[:-1])
            return
        if kb.matches(data, "searchNext"):
            self._select_match(next_match(self._search.matches, self._search.current_index))
            return
        if kb.matches(data, "searchPrevious"):
            self._select_match(previous_match(self._search.matches, self._search.current_index))
            return

        if data.startswith(BRACKETED_PASTE_START):
            pasted = data[len(BRACKETED_PASTE_START) :].replace(BRACKETED_PASTE_END, "")
            text = pasted.split("\n")[0].replace("\r", "")
            if text:
                self._set_query(self._search.query + text)
            return
        if is_printable_input(data):
            self._set_query(self._search.query + data)

    def _set_query(self, query: str) -> None:
        matches = find_matches(self._lines, query)
        index = jump_to_nearest(matches, self._cursor)
        self._search = SearchState(
            active=True,
            query=query,
            matches=tuple(matches),
            current_index=index or 0,
        )
        if index is not None:
            self._jump_to(matches[index])

    def _select_match(self, index: int) -> None:
        if not self._search.matches:
            return
        self._search = replace(self._search, current_index=index)
        self._jump_to(self._search.matches[index])

    def _jump_to(self, match: SearchMatch) -> None:
        self._cursor = Cursor(match.row, match.col)
        self._viewport = center_on_row(match.row, self._viewport, len(self._lines))

    # -- Mouse ---------------------------------------------------------------

    def _handle_mouse(self, event: MouseEvent) -> None:
        if not event.pressed:
            return

        now = self._clock()
        if event.button == BUTTON_WHEEL_UP:
            self._viewport = scroll_by(self._viewport, -self._wheel_step, len(self._lines), now, self._scroll_grace)
        elif event.button == BUTTON_WHEEL_DOWN:
            self._viewport = scroll_by(self._viewport, self._wheel_step, len(self._lines), now, self._scroll_grace)
        elif event.button == BUTTON_PRIMARY:
            position = hit_test(event, self.geometry, self._lines, self.scroll_top)
            if position is None:
                return
            self._cursor = position
            self._viewport = replace(self._viewport, manual_scroll_until=now + self._scroll_grace)

    # -- Auto-scroll ---------------------------------------------------------

    def _settle(self) -> None:
        self._viewport = ensure_visible(self._cursor, self._viewport, len(self._lines), self._clock())
