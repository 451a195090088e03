"""Multi-line input editor.

Owns the text being composed and the cursor inside it. All edits go
through this class so the cursor always sits on a grapheme boundary and
inside ``[0, len(text)]``. Vertical movement is expressed in display rows,
so it needs the current wrap width from the caller.
"""

from enum import Enum

from .width import boundaries
from .wrap import (
    DisplayLine,
    cursor_position,
    line_end_offset,
    line_start_offset,
    offset_at,
    wrap_text,
)

TAB_WIDTH = 4


class Direction(str, Enum):
    """Cursor movement directions."""

    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"
    HOME = "home"
    END = "end"


def normalize_input(text: str) -> str:
    """Normalize typed or pasted text for the buffer.

    Line endings become ``\\n`` and tabs become spaces, so the buffer holds
    no zero-width control characters besides the line break.
    """
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    return text.replace("\t", " " * TAB_WIDTH)


class InputEditor:
    """Text buffer with a grapheme-aligned cursor."""

    def __init__(self, text: str = "") -> None:
        self._text = normalize_input(text)
        self._cursor = len(self._text)
        # A cursor on a soft wrap point is drawn on the lower row after HOME
        # or vertical movement to column 0
        self._lower_row = False
        # First display row shown in the input box
        self.scroll_row = 0

    @property
    def text(self) -> str:
        return self._text

    @property
    def cursor(self) -> int:
        return self._cursor

    def __len__(self) -> int:
        return len(self._text)

    def is_empty(self) -> bool:
        return not self._text

    def lines(self, width: int) -> list[DisplayLine]:
        """Wrap the buffer for the given width."""
        return wrap_text(self._text, max(width, 1))

    def cursor_position(self, width: int) -> tuple[int, int]:
        """Return the cursor's (row, column) for the given width."""
        return cursor_position(self.lines(width), self._cursor, self._lower_row)

    def line_count(self, width: int) -> int:
        return len(self.lines(width))

    # Edit operations

    def insert(self, text: str) -> None:
        """Insert text at the cursor and move the cursor past it.

        Pasted text goes through here unchanged apart from line ending and
        tab normalization, embedded newlines included.
        """
        text = normalize_input(text)
        if not text:
            return
        self._text = self._text[: self._cursor] + text + self._text[self._cursor :]
        self._cursor = self._snap_forward(self._cursor + len(text))
        self._lower_row = False

    def insert_newline(self) -> None:
        self.insert("\n")

    def delete_backward(self) -> bool:
        """Delete the grapheme before the cursor. Returns False at the start."""
        if self._cursor == 0:
            return False
        start = self._previous_boundary(self._cursor)
        self._text = self._text[:start] + self._text[self._cursor :]
        self._cursor = self._snap_forward(start)
        self._lower_row = False
        return True

    def delete_forward(self) -> bool:
        """Delete the grapheme after the cursor. Returns False at the end."""
        if self._cursor >= len(self._text):
            return False
        end = self._next_boundary(self._cursor)
        self._text = self._text[: self._cursor] + self._text[end:]
        self._cursor = self._snap_forward(self._cursor)
        self._lower_row = False
        return True

    def clear(self) -> None:
        """Empty the buffer and reset cursor and scroll."""
        self._text = ""
        self._cursor = 0
        self._lower_row = False
        self.scroll_row = 0

    def set_text(self, text: str) -> None:
        """Replace the buffer, placing the cursor at the end."""
        self._text = normalize_input(text)
        self._cursor = len(self._text)
        self._lower_row = False
        self.scroll_row = 0

    # Cursor movement

    def move_cursor(self, direction: Direction, width: int) -> bool:
        """Move the cursor one step. Returns True if it moved."""
        before = self.cursor_position(width)
        if direction is Direction.LEFT:
            if self._cursor > 0:
                self._cursor = self._previous_boundary(self._cursor)
            self._lower_row = False
        elif direction is Direction.RIGHT:
            if self._cursor < len(self._text):
                self._cursor = self._next_boundary(self._cursor)
            self._lower_row = False
        elif direction is Direction.UP:
            self._move_vertical(-1, width)
        elif direction is Direction.DOWN:
            self._move_vertical(1, width)
        elif direction is Direction.HOME:
            self._cursor = line_start_offset(self.lines(width), self._cursor, self._lower_row)
            self._lower_row = True
        elif direction is Direction.END:
            self._cursor = line_end_offset(self.lines(width), self._cursor, self._lower_row)
            self._lower_row = False
        else:
            raise ValueError(f"Unknown direction: {direction}")
        return self.cursor_position(width) != before

    def _move_vertical(self, delta: int, width: int) -> None:
        lines = self.lines(width)
        row, column = cursor_position(lines, self._cursor, self._lower_row)
        target = row + delta
        if target < 0 or target >= len(lines):
            return
        self._cursor = offset_at(lines, target, column)
        self._lower_row = self._cursor == lines[target].start

    def follow_cursor(self, width: int, visible_rows: int) -> int:
        """Adjust ``scroll_row`` so the cursor row is visible. Returns it."""
        if visible_rows < 1:
            return self.scroll_row
        row, _ = self.cursor_position(width)
        if row < self.scroll_row:
            self.scroll_row = row
        elif row >= self.scroll_row + visible_rows:
            self.scroll_row = row - visible_rows + 1
        max_scroll = max(0, self.line_count(width) - visible_rows)
        self.scroll_row = min(self.scroll_row, max_scroll)
        return self.scroll_row

    # Boundary helpers

    def _previous_boundary(self, offset: int) -> int:
        previous = 0
        for boundary in boundaries(self._text):
            if boundary >= offset:
                break
            previous = boundary
        return previous

    def _next_boundary(self, offset: int) -> int:
        for boundary in boundaries(self._text):
            if boundary > offset:
                return boundary
        return len(self._text)

    def _snap_forward(self, offset: int) -> int:
        """Move offset to the nearest grapheme boundary at or after it.

        An insertion can merge with the grapheme after it (typing a base
        letter in front of a combining mark), which would leave the cursor
        inside a cluster.
        """
        for boundary in boundaries(self._text):
            if boundary >= offset:
                return boundary
        return len(self._text)
