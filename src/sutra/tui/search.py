"""Incremental, case-insensitive substring search over the line buffer."""

from __future__ import annotations

from dataclasses import dataclass, field

from sutra.tui.line_buffer import Cursor

# Weight applied to row distance so any match on a nearer row beats any
# match on a farther row.
ROW_DISTANCE_WEIGHT = 1000


@dataclass(frozen=True)
class SearchMatch:
    row: int
    col: int
    length: int

    def contains(self, col: int) -> bool:
        return self.col <= col < self.col + self.length


@dataclass(frozen=True)
class SearchState:
    """Search mode state: the query being typed and its current matches."""

    active: bool = False
    query: str = ""
    matches: tuple[SearchMatch, ...] = field(default_factory=tuple)
    current_index: int = 0

    @property
    def current_match(self) -> SearchMatch | None:
        if not self.matches:
            return None
        return self.matches[self.current_index]


def find_matches(lines: list[str], query: str) -> list[SearchMatch]:
    """Find every occurrence of *query* in *lines*, in document order.

    Matching ignores case. After each hit the scan resumes one character past
    the hit's start.
    """
    if not query:
        return []

    needle = query.lower()
    matches: list[SearchMatch] = []
    for row, line in enumerate(lines):
        haystack = line.lower()
        start = 0
        while True:
            found = haystack.find(needle, start)
            if found == -1:
                break
            matches.append(SearchMatch(row=row, col=found, length=len(query)))
            start = found + 1
    return matches


def jump_to_nearest(matches: list[SearchMatch] | tuple[SearchMatch, ...], cursor: Cursor) -> int | None:
    """Return the index of the match closest to *cursor*, or ``None``.

    Row distance dominates column distance; ties go to the earlier match.
    """
    best_index: int | None = None
    best_distance = 0
    for i, match in enumerate(matches):
        distance = abs(match.row - cursor.row) * ROW_DISTANCE_WEIGHT + abs(match.col - cursor.col)
        if best_index is None or distance < best_distance:
            best_index = i
            best_distance = distance
    return best_index


def next_match(matches: list[SearchMatch] | tuple[SearchMatch, ...], index: int) -> int:
    if not matches:
        return 0
    return (index + 1) % len(matches)


def previous_match(matches: list[SearchMatch] | tuple[SearchMatch, ...], index: int) -> int:
    if not matches:
        return 0
    return (index - 1 + len(matches)) % len(matches)


def matches_on_row(matches: list[SearchMatch] | tuple[SearchMatch, ...], row: int) -> list[SearchMatch]:
    return [m for m in matches if m.row == row]
