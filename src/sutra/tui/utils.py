"""Terminal text utilities: ANSI stripping, width measurement, truncation.

Used for the widget chrome (borders, status row) where the rendered text may
contain ANSI styling and non-ASCII glyphs. Buffer columns themselves are plain
character offsets and never go through these helpers.
"""

from __future__ import annotations

import re
import unicodedata

import grapheme
import wcwidth as _wcwidth

# ---------------------------------------------------------------------------
# Regex patterns for ANSI sequences
# ---------------------------------------------------------------------------

# CSI SGR and cursor sequences: ESC[ <params> <final byte>
_ANSI_RE = re.compile(r"\x1b\[[0-9;]*[mGKHJ]")

_STRIP_RE = re.compile(
    r"\x1b\[[0-9;]*[mGKHJ]"        # CSI
    r"|\x1b\]8;;[^\x07]*\x07"       # OSC 8
    r"|\x1b_[^\x07\x1b]*(?:\x07|\x1b\\)"  # APC
)

# ---------------------------------------------------------------------------
# Width cache (capped at 512 entries)
# ---------------------------------------------------------------------------

_width_cache: dict[str, int] = {}
_WIDTH_CACHE_MAX = 512


def _cache_width(key: str, value: int) -> int:
    if len(_width_cache) >= _WIDTH_CACHE_MAX:
        _width_cache.clear()
    _width_cache[key] = value
    return value


def _grapheme_width(g: str) -> int:
    """Return the terminal display width of a single grapheme cluster."""
    if not g:
        return 0

    if len(g) == 1:
        cp = ord(g)
        if cp < 0x20 or (0x7F <= cp <= 0x9F):
            return 0
        return max(_wcwidth.wcwidth(g), 0)

    # Emoji presentation selector or ZWJ sequence
    if "\ufe0f" in g or "\u200d" in g:
        return 2

    first = g[0]
    if ord(first) >= 0x1F000:
        return 2
    if unicodedata.category(first) in ("Mn", "Me", "Cf"):
        return 0
    return max(_wcwidth.wcwidth(first), 0)


def strip_ansi(text: str) -> str:
    return _STRIP_RE.sub("", text)


def visible_width(text: str) -> int:
    """Calculate the visible terminal width of *text*.

    Strips ANSI escape sequences, uses a fast path for printable ASCII and
    caches results for everything else.
    """
    if not text:
        return 0

    stripped = strip_ansi(text)
    if not stripped:
        return 0

    if all(0x20 <= ord(ch) <= 0x7E for ch in stripped):
        return len(stripped)

    cached = _width_cache.get(stripped)
    if cached is not None:
        return cached

    total = sum(_grapheme_width(g) for g in grapheme.graphemes(stripped))
    return _cache_width(stripped, total)


def truncate_to_width(
    text: str,
    max_width: int,
    ellipsis: str = "...",
    pad: bool = False,
) -> str:
    """Truncate *text* to fit within *max_width* visible columns.

    If the text is wider than *max_width* it is cut and *ellipsis* appended
    (the ellipsis counts towards the width). With *pad* the result is
    right-padded with spaces to exactly *max_width*.
    """
    if max_width <= 0:
        return ""

    text_width = visible_width(text)
    if text_width <= max_width:
        if pad:
            return text + " " * (max_width - text_width)
        return text

    target_width = max_width - visible_width(ellipsis)
    if target_width <= 0:
        return _take_columns(ellipsis, max_width)

    result = _take_columns(text, target_width)
    # Close any style left open by the cut
    if _ANSI_RE.search(result):
        result += "\x1b[0m"
    result += ellipsis

    if pad:
        result_width = visible_width(result)
        if result_width < max_width:
            result += " " * (max_width - result_width)

    return result


def _take_columns(text: str, max_cols: int) -> str:
    """Return a prefix of *text* that fits within *max_cols* visible columns.

    ANSI codes are preserved; the text is cut at grapheme boundaries.
    """
    result: list[str] = []
    cols = 0
    i = 0

    while i < len(text):
        m = _ANSI_RE.match(text, i)
        if m is not None:
            result.append(m.group(0))
            i = m.end()
            continue

        g = next(grapheme.graphemes(text[i:]))
        w = _grapheme_width(g)
        if cols + w > max_cols:
            break
        result.append(g)
        cols += w
        i += len(g)

    return "".join(result)
