"""Text formatting utilities for the TUI.

Hides how laid-out transcript lines and editor rows become Rich text:
style keys are looked up in the UI config and theme variables
(``$primary`` and friends) are resolved against the running app's
palette, since Rich itself knows nothing about Textual themes.
"""

from collections.abc import Mapping

from rich.style import Style
from rich.text import Text

from ..chat.layout import TranscriptLine
from ..editor.width import grapheme_width, graphemes
from ..editor.wrap import DisplayLine
from .config import CURSOR_STYLE, HEADER_STYLES, LINE_STYLES


def resolve_style(spec: str, variables: Mapping[str, str]) -> str:
    """Replace ``$name`` tokens in a style string with theme colors.

    Unknown variables, and values Rich cannot parse as a single color
    (e.g. ``"#89b4fa 30%"``), are dropped.
    """
    parts = []
    for token in spec.split():
        if not token.startswith("$"):
            parts.append(token)
            continue
        value = variables.get(token[1:], "")
        color = value.split()[0] if value else ""
        if color.startswith("#"):
            parts.append(color)
    return " ".join(parts)


def _style(spec: str, variables: Mapping[str, str]) -> Style:
    resolved = resolve_style(spec, variables)
    return Style.parse(resolved) if resolved else Style()


def transcript_line_text(line: TranscriptLine, variables: Mapping[str, str]) -> Text:
    """Render one transcript row, styling the clock/author header apart."""
    body_style = _style(LINE_STYLES.get(line.style.value, ""), variables)
    text = Text(no_wrap=True, overflow="crop")
    if line.header_width:
        header, body = _split_at_column(line.text, line.header_width)
        header_spec = HEADER_STYLES.get(line.style.value)
        text.append(header, _style(header_spec, variables) if header_spec else body_style)
        text.append(body, body_style)
    else:
        text.append(line.text, body_style)
    return text


def input_text(
    rows: list[DisplayLine],
    cursor: tuple[int, int],
    show_cursor: bool = True,
) -> Text:
    """Render the visible input rows with the cursor cell highlighted.

    A cursor past the last character of a row is drawn as a highlighted
    space in the column the wrap width leaves free.
    """
    cursor_row, cursor_column = cursor
    text = Text(no_wrap=True, overflow="crop")
    for index, row in enumerate(rows):
        if index:
            text.append("\n")
        if not show_cursor or index != cursor_row:
            text.append(row.text)
            continue
        before, rest = _split_at_column(row.text, cursor_column)
        text.append(before)
        if rest:
            under = graphemes(rest)[0]
            text.append(under, CURSOR_STYLE)
            text.append(rest[len(under):])
        else:
            text.append(" ", CURSOR_STYLE)
    if show_cursor and not rows:
        text.append(" ", CURSOR_STYLE)
    return text


def _split_at_column(text: str, column: int) -> tuple[str, str]:
    """Split ``text`` at the first grapheme boundary at or after ``column`` cells."""
    used = 0
    offset = 0
    for cluster in graphemes(text):
        if used >= column:
            break
        used += grapheme_width(cluster)
        offset += len(cluster)
    return text[:offset], text[offset:]
