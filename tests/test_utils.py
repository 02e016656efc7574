"""Tests for sutra.tui.utils -- terminal text utilities."""

from __future__ import annotations

from sutra.tui.utils import strip_ansi, truncate_to_width, visible_width


# ---------------------------------------------------------------------------
# visible_width
# ---------------------------------------------------------------------------


class TestVisibleWidth:
    """Measure the visible terminal width of text."""

    def test_plain_ascii(self) -> None:
        assert visible_width("hello") == 5

    def test_empty_string(self) -> None:
        assert visible_width("") == 0

    def test_ansi_codes_do_not_count(self) -> None:
        assert visible_width("\x1b[30;43mhi\x1b[0m") == 2

    def test_wide_cjk_characters_count_as_two(self) -> None:
        assert visible_width("世") == 2

    def test_box_drawing_is_single_width(self) -> None:
        assert visible_width("╭─╮") == 3

    def test_osc8_hyperlink_does_not_count(self) -> None:
        text = "\x1b]8;;https://example.com\x07link\x1b]8;;\x07"
        assert visible_width(text) == 4


class TestStripAnsi:
    def test_removes_sgr(self) -> None:
        assert strip_ansi("\x1b[1;36m# Title\x1b[0m") == "# Title"


# ---------------------------------------------------------------------------
# truncate_to_width
# ---------------------------------------------------------------------------


class TestTruncateToWidth:
    def test_short_text_unchanged(self) -> None:
        assert truncate_to_width("hi", 10) == "hi"

    def test_truncates_with_ellipsis(self) -> None:
        assert truncate_to_width("hello world", 8) == "hello..."

    def test_custom_ellipsis(self) -> None:
        assert truncate_to_width("hello world", 6, ellipsis="~") == "hello~"

    def test_zero_width_returns_empty(self) -> None:
        assert truncate_to_width("hello", 0) == ""

    def test_ellipsis_wider_than_target(self) -> None:
        assert truncate_to_width("hello", 2) == ".."

    def test_pad_fills_to_max_width(self) -> None:
        assert truncate_to_width("hi", 5, pad=True) == "hi   "

    def test_truncated_and_padded_has_exact_width(self) -> None:
        result = truncate_to_width("世" * 10, 7, pad=True)
        assert visible_width(result) == 7

    def test_open_style_is_reset_before_ellipsis(self) -> None:
        result = truncate_to_width("\x1b[31mhello world\x1b[0m", 8)
        assert result == "\x1b[31mhello\x1b[0m..."
