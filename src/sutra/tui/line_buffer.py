"""Line buffer operations for the text view.

The buffer is a plain ``list[str]``. Every mutation returns a new list and a
new :class:`Cursor`; inputs are never modified in place, so callers can keep
the previous state around and notify the host with the joined content.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Cursor:
    """A buffer position: line index and character offset within that line."""

    row: int = 0
    col: int = 0


def split(content: str) -> list[str]:
    """Split *content* into lines on ``\\n``.

    No other normalisation happens, so ``join(split(content)) == content``.
    """
    return content.split("\n")


def join(lines: list[str]) -> str:
    return "\n".join(lines)


def _line_at(lines: list[str], row: int) -> str:
    return lines[row] if 0 <= row < len(lines) else ""


def insert_char(lines: list[str], cursor: Cursor, ch: str) -> tuple[list[str], Cursor]:
    """Splice *ch* into the cursor's line and advance the column past it."""
    new_lines = list(lines) or [""]
    line = _line_at(new_lines, cursor.row)
    new_lines[cursor.row] = line[: cursor.col] + ch + line[cursor.col :]
    return new_lines, Cursor(cursor.row, cursor.col + len(ch))


def insert_text(lines: list[str], cursor: Cursor, text: str) -> tuple[list[str], Cursor]:
    """Insert *text* (possibly spanning several lines) at the cursor.

    Line endings are normalised to ``\\n``. The cursor ends up right after the
    last inserted character.
    """
    normalized = text.replace("\r\n", "\n").replace("\r", "\n")
    inserted = normalized.split("\n")
    if len(inserted) == 1:
        return insert_char(lines, cursor, normalized)

    current = _line_at(lines, cursor.row)
    before = current[: cursor.col]
    after = current[cursor.col :]

    new_lines = list(lines[: cursor.row])
    new_lines.append(before + inserted[0])
    new_lines.extend(inserted[1:-1])
    new_lines.append(inserted[-1] + after)
    new_lines.extend(lines[cursor.row + 1 :])

    return new_lines, Cursor(cursor.row + len(inserted) - 1, len(inserted[-1]))


def split_line(lines: list[str], cursor: Cursor) -> tuple[list[str], Cursor]:
    """Break the cursor's line at the cursor (the Enter key)."""
    new_lines = list(lines) or [""]
    line = _line_at(new_lines, cursor.row)
    new_lines[cursor.row] = line[: cursor.col]
    new_lines.insert(cursor.row + 1, line[cursor.col :])
    return new_lines, Cursor(cursor.row + 1, 0)


def delete_backward(lines: list[str], cursor: Cursor) -> tuple[list[str], Cursor]:
    """Delete the character left of the cursor (the Backspace key).

    At column 0 the current line is joined onto the end of the previous one
    and the cursor lands on the join point. At ``(0, 0)`` nothing changes.
    """
    new_lines = list(lines)
    row, col = cursor.row, cursor.col

    if col > 0:
        line = _line_at(new_lines, row)
        new_lines[row] = line[: col - 1] + line[col:]
        return new_lines, Cursor(row, col - 1)

    if row > 0:
        previous = _line_at(new_lines, row - 1)
        new_lines[row - 1] = previous + _line_at(new_lines, row)
        del new_lines[row]
        return new_lines, Cursor(row - 1, len(previous))

    return new_lines, cursor
