"""Display width and grapheme segmentation.

Hides how the terminal column width of text is measured and where a
user-perceived character starts and ends. Everything else in the editor
works on grapheme clusters returned from here, so the wrap engine never
splits what the width oracle treats as a single cell group.
"""

import unicodedata

import grapheme
from wcwidth import wcwidth

ZWJ = "\u200d"
VS16 = "\ufe0f"
_ZERO_WIDTH_CATEGORIES = ("Mn", "Me", "Cf", "Cc")


def _is_regional_indicator(ch: str) -> bool:
    return 0x1F1E6 <= ord(ch) <= 0x1F1FF


def char_width(ch: str) -> int:
    """Return the column width of a single code point: 0, 1 or 2.

    Combining marks, format and control characters are zero width.
    Code points the width tables do not know default to 1.
    """
    if unicodedata.category(ch) in _ZERO_WIDTH_CATEGORIES:
        return 0
    width = wcwidth(ch)
    if width < 0:
        return 0
    return min(width, 2)


def graphemes(text: str) -> list[str]:
    """Split text into extended grapheme clusters (UAX #29).

    Newlines are control characters and always form a cluster of their own.
    """
    return list(grapheme.graphemes(text))


def grapheme_width(cluster: str) -> int:
    """Return the column width of one grapheme cluster (0, 1 or 2)."""
    if not cluster:
        return 0
    if len(cluster) > 1 and (_is_regional_indicator(cluster[0]) or ZWJ in cluster):
        return 2
    width = char_width(cluster[0])
    if width == 1 and VS16 in cluster:
        return 2
    return width


def text_width(text: str) -> int:
    """Return the total column width of a string without newlines."""
    return sum(grapheme_width(g) for g in graphemes(text))


def boundaries(text: str) -> list[int]:
    """Return every grapheme boundary offset in text, including 0 and len(text)."""
    offsets = [0]
    position = 0
    for cluster in graphemes(text):
        position += len(cluster)
        offsets.append(position)
    return offsets
