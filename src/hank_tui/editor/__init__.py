"""Input editing for hank-tui.

Module structure (each module hides a design decision):
- width.py: how wide a character is and where graphemes end
- wrap.py: how the buffer is broken into display rows
- buffer.py: the text buffer and its cursor
- history.py: browsing previously sent messages
"""

from .buffer import Direction, InputEditor
from .history import HistoryNavigator
from .width import char_width, grapheme_width, graphemes, text_width
from .wrap import DisplayLine, cursor_position, offset_at, wrap_text

__all__ = [
    "Direction",
    "DisplayLine",
    "HistoryNavigator",
    "InputEditor",
    "char_width",
    "cursor_position",
    "grapheme_width",
    "graphemes",
    "offset_at",
    "text_width",
    "wrap_text",
]
