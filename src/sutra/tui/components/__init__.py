"""TUI components."""

from sutra.tui.components.text_view import TextView, TextViewOptions, TextViewTheme

__all__ = [
    "TextView",
    "TextViewOptions",
    "TextViewTheme",
]
