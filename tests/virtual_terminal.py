"""Virtual terminal for testing -- records output and replays input in-memory.

A ``VirtualTerminal`` stands in for the host application's terminal: the
text view writes its mouse-mode escape sequences through ``write``, and tests
push keystrokes or mouse reports at the view with ``send``.
"""

from __future__ import annotations

from typing import Callable


class VirtualTerminal:
    """In-memory terminal that records all writes for test inspection.

    Parameters
    ----------
    rows:
        Number of terminal rows (height).
    columns:
        Number of terminal columns (width).
    """

    def __init__(self, rows: int = 24, columns: int = 80) -> None:
        self.rows = rows
        self.columns = columns
        self._buffer: list[str] = []
        self._input_handler: Callable[[str], None] | None = None

    # -- Output -------------------------------------------------------------

    def write(self, data: str) -> None:
        """Append *data* to the internal buffer."""
        self._buffer.append(data)

    @property
    def output(self) -> str:
        """Return everything written to the terminal as a single string."""
        return "".join(self._buffer)

    @property
    def write_count(self) -> int:
        """Return the number of individual ``write`` calls made."""
        return len(self._buffer)

    def clear_buffer(self) -> None:
        self._buffer.clear()

    # -- Input --------------------------------------------------------------

    def attach(self, on_input: Callable[[str], None]) -> None:
        self._input_handler = on_input

    def send(self, *chunks: str) -> None:
        """Feed each chunk to the attached input handler, one read at a time.

        Raises ``RuntimeError`` if nothing is attached.
        """
        if self._input_handler is None:
            raise RuntimeError("No input handler attached -- call attach() first")
        for chunk in chunks:
            self._input_handler(chunk)

    def click(self, x: int, y: int, button: int = 0) -> None:
        """Send an SGR press/release pair at 0-based screen cell (x, y)."""
        self.send(f"\x1b[<{button};{x + 1};{y + 1}M", f"\x1b[<{button};{x + 1};{y + 1}m")

    def wheel(self, down: bool = True, x: int = 5, y: int = 5) -> None:
        button = 65 if down else 64
        self.send(f"\x1b[<{button};{x + 1};{y + 1}M")
