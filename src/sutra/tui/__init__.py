"""sutra-tui: Scrollable, searchable, mouse-aware text view for the terminal."""

# Components (re-exported from components package)
from sutra.tui.components import TextView, TextViewOptions, TextViewTheme

# Syntax highlighting
from sutra.tui.highlight import MarkdownLineHighlighter, SyntaxHighlighter

# Keybindings
from sutra.tui.keybindings import (
    DEFAULT_TEXT_VIEW_KEYBINDINGS,
    TextViewAction,
    TextViewKeybindingsManager,
    get_text_view_keybindings,
    set_text_view_keybindings,
)

# Keyboard input handling
from sutra.tui.keys import Key, KeyId, matches_key, parse_key

# Line buffer
from sutra.tui.line_buffer import Cursor, delete_backward, insert_char, insert_text, split_line

# Mouse
from sutra.tui.mouse import (
    MOUSE_DISABLE,
    MOUSE_ENABLE,
    Geometry,
    MouseEvent,
    MouseParser,
    MouseReporting,
    hit_test,
    parse_mouse_events,
    split_mouse_input,
)

# Search
from sutra.tui.search import SearchMatch, SearchState, find_matches, jump_to_nearest

# Rendering
from sutra.tui.segments import StyledSegment, compose_line

# Utilities
from sutra.tui.utils import truncate_to_width, visible_width

# Viewport
from sutra.tui.viewport import Viewport, ensure_visible, scroll_by

__all__ = [
    # Components
    "TextView",
    "TextViewOptions",
    "TextViewTheme",
    # Highlighting
    "MarkdownLineHighlighter",
    "SyntaxHighlighter",
    # Keybindings
    "DEFAULT_TEXT_VIEW_KEYBINDINGS",
    "TextViewAction",
    "TextViewKeybindingsManager",
    "get_text_view_keybindings",
    "set_text_view_keybindings",
    # Keys
    "Key",
    "KeyId",
    "matches_key",
    "parse_key",
    # Line buffer
    "Cursor",
    "delete_backward",
    "insert_char",
    "insert_text",
    "split_line",
    # Mouse
    "MOUSE_DISABLE",
    "MOUSE_ENABLE",
    "Geometry",
    "MouseEvent",
    "MouseParser",
    "MouseReporting",
    "hit_test",
    "parse_mouse_events",
    "split_mouse_input",
    # Search
    "SearchMatch",
    "SearchState",
    "find_matches",
    "jump_to_nearest",
    # Rendering
    "StyledSegment",
    "compose_line",
    # Utilities
    "truncate_to_width",
    "visible_width",
    # Viewport
    "Viewport",
    "ensure_visible",
    "scroll_by",
]
