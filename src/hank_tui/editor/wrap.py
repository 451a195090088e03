"""Line-wrap engine.

Hides how a logical multi-line buffer is broken into display rows for a
given viewport width, and how a buffer offset maps to a (row, column) on
screen and back.

Wrapping is greedy character wrapping on grapheme boundaries (no word
wrapping), recomputed from scratch on every call. Buffers are chat
messages, small enough that incremental patching is not worth it.
"""

from dataclasses import dataclass

from .width import graphemes, grapheme_width


@dataclass(frozen=True)
class DisplayLine:
    """One visually wrapped row of the buffer.

    ``start`` and ``end`` index the buffer; ``end`` is exclusive and never
    includes the newline that terminated the logical line.
    """

    start: int
    end: int
    text: str
    width: int


def wrap_text(text: str, width: int) -> list[DisplayLine]:
    """Wrap text into display lines no wider than ``width`` columns.

    A grapheme that would cross the right edge moves whole to the next row,
    leaving the previous row short. Every logical line, including an empty
    one, yields at least one display line. A grapheme wider than ``width``
    (only possible when width is 1) gets a row to itself.

    Raises:
        ValueError: If width is less than 1
    """
    if width < 1:
        raise ValueError(f"wrap width must be >= 1, got {width}")

    lines: list[DisplayLine] = []
    line_start = 0
    for logical in text.split("\n"):
        row_start = line_start
        row_width = 0
        position = line_start
        for cluster in graphemes(logical):
            cluster_width = grapheme_width(cluster)
            if row_width + cluster_width > width and position > row_start:
                lines.append(
                    DisplayLine(row_start, position, text[row_start:position], row_width)
                )
                row_start = position
                row_width = 0
            row_width += cluster_width
            position += len(cluster)
        lines.append(DisplayLine(row_start, position, text[row_start:position], row_width))
        # Skip past the newline separating this logical line from the next
        line_start = position + 1
    return lines


def _row_boundaries(line: DisplayLine) -> list[tuple[int, int]]:
    """Return (offset, column) for every grapheme boundary in a display line."""
    result = [(line.start, 0)]
    offset = line.start
    column = 0
    for cluster in graphemes(line.text):
        offset += len(cluster)
        column += grapheme_width(cluster)
        result.append((offset, column))
    return result


def is_soft_wrap_start(lines: list[DisplayLine], row: int) -> bool:
    """True if ``row`` continues the logical line of the row above it."""
    return 0 < row < len(lines) and lines[row - 1].end == lines[row].start


def cursor_position(
    lines: list[DisplayLine], offset: int, lower_row: bool = False
) -> tuple[int, int]:
    """Map a buffer offset to its (row, column) on screen.

    The first display line whose range contains the offset wins, so an
    offset sitting exactly on a soft wrap point is shown after the last
    character of the upper row. With ``lower_row`` it is shown at column 0
    of the continuation row instead.
    """
    if lower_row:
        for row, line in enumerate(lines):
            if line.start == offset and is_soft_wrap_start(lines, row):
                return row, 0
    for row, line in enumerate(lines):
        if line.start <= offset <= line.end:
            return row, _column_of(line, offset)
    last = len(lines) - 1
    return last, lines[last].width


def _column_of(line: DisplayLine, offset: int) -> int:
    column = 0
    for boundary, boundary_column in _row_boundaries(line):
        if boundary > offset:
            break
        column = boundary_column
    return column


def offset_at(lines: list[DisplayLine], row: int, column: int) -> int:
    """Map a (row, column) back to the nearest valid buffer offset.

    Returns the boundary at exactly ``column`` when there is one, otherwise
    the closest boundary to its left. Columns past the end of the row clamp
    to the row's end. Rows out of range clamp to the first or last row.
    """
    row = max(0, min(row, len(lines) - 1))
    line = lines[row]
    previous = line.start
    for boundary, boundary_column in _row_boundaries(line):
        if boundary_column == column:
            return boundary
        if boundary_column > column:
            return previous
        previous = boundary
    return line.end


def line_start_offset(
    lines: list[DisplayLine], offset: int, lower_row: bool = False
) -> int:
    """Return the offset where the display row holding ``offset`` starts."""
    row, _ = cursor_position(lines, offset, lower_row)
    return lines[row].start


def line_end_offset(
    lines: list[DisplayLine], offset: int, lower_row: bool = False
) -> int:
    """Return the offset where the display row holding ``offset`` ends."""
    row, _ = cursor_position(lines, offset, lower_row)
    return lines[row].end
