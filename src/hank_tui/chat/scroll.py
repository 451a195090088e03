"""Scroll state for the transcript view.

Offsets are top-anchored: ``offset`` is the index of the first visible
display line, and the bottom edge is ``max_offset``. While
``auto_follow`` is set the view sticks to the bottom as content grows.
Any manual scroll decides ``auto_follow`` afresh: it is on exactly when
the scroll ends on the bottom edge.
"""


class ScrollController:
    """Clamped scroll offset over the wrapped transcript."""

    def __init__(self, viewport_height: int = 0, total_lines: int = 0) -> None:
        self._viewport_height = max(0, viewport_height)
        self._total_lines = max(0, total_lines)
        self._offset = 0
        self.auto_follow = True
        self._reclamp()

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def viewport_height(self) -> int:
        return self._viewport_height

    @property
    def total_lines(self) -> int:
        return self._total_lines

    @property
    def max_offset(self) -> int:
        return max(0, self._total_lines - self._viewport_height)

    @property
    def at_bottom(self) -> bool:
        return self._offset == self.max_offset

    def visible_range(self) -> tuple[int, int]:
        """Return the [start, stop) slice of display lines on screen."""
        stop = min(self._total_lines, self._offset + self._viewport_height)
        return self._offset, stop

    # Content and viewport changes

    def set_total_lines(self, total_lines: int) -> None:
        """Record new transcript length; follows the bottom if auto-following."""
        self._total_lines = max(0, total_lines)
        self._reclamp()

    def set_viewport_height(self, height: int) -> None:
        self._viewport_height = max(0, height)
        self._reclamp()

    def _reclamp(self) -> None:
        if self.auto_follow:
            self._offset = self.max_offset
        else:
            self._offset = max(0, min(self._offset, self.max_offset))

    # Manual scrolling

    def _scroll_to(self, offset: int) -> None:
        self._offset = max(0, min(offset, self.max_offset))
        self.auto_follow = self._offset == self.max_offset

    def scroll_up(self, lines: int = 1) -> None:
        self._scroll_to(self._offset - lines)

    def scroll_down(self, lines: int = 1) -> None:
        self._scroll_to(self._offset + lines)

    def page_up(self) -> None:
        self.scroll_up(max(1, self._viewport_height))

    def page_down(self) -> None:
        self.scroll_down(max(1, self._viewport_height))

    def home(self) -> None:
        self._scroll_to(0)

    def end(self) -> None:
        self._scroll_to(self.max_offset)

    def follow(self) -> None:
        """Jump to the bottom and resume auto-follow, e.g. after a send."""
        self.end()
