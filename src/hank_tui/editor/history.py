"""Sent-message history navigation.

Hides how previously sent messages are stored and browsed. While
browsing, the editor shows a copy of the selected entry; the stored
entries themselves never change. Edits made while browsing do not leave
browsing mode, only sending (or stepping past the newest entry) does.
"""

from ..config import INPUT_HISTORY_MAX_SIZE
from .buffer import InputEditor


class HistoryNavigator:
    """Ordered list of sent messages with an optional browse position.

    ``index`` is ``None`` while idle, otherwise the position of the entry
    currently shown in the editor.
    """

    def __init__(
        self,
        entries: list[str] | None = None,
        max_size: int = INPUT_HISTORY_MAX_SIZE,
        dedupe: bool = True,
    ) -> None:
        self._entries: list[str] = list(entries or [])[-max_size:]
        self._max_size = max_size
        self._dedupe = dedupe
        self._index: int | None = None
        self._draft: str = ""

    @property
    def entries(self) -> tuple[str, ...]:
        return tuple(self._entries)

    @property
    def index(self) -> int | None:
        return self._index

    @property
    def is_navigating(self) -> bool:
        return self._index is not None

    def __len__(self) -> int:
        return len(self._entries)

    def previous(self, editor: InputEditor) -> bool:
        """Show the next older entry, clamping at the oldest.

        The first step saves the editor's draft so it can be restored.
        """
        if not self._entries:
            return False
        if self._index is None:
            self._draft = editor.text
            self._index = len(self._entries) - 1
        elif self._index > 0:
            self._index -= 1
        editor.set_text(self._entries[self._index])
        return True

    def next(self, editor: InputEditor) -> bool:
        """Show the next newer entry; past the newest, restore the draft."""
        if self._index is None:
            return False
        if self._index < len(self._entries) - 1:
            self._index += 1
            editor.set_text(self._entries[self._index])
        else:
            editor.set_text(self._draft)
            self.reset()
        return True

    def record(self, text: str) -> None:
        """Remember a sent message and stop browsing.

        Empty messages are ignored and a repeat of the newest entry is
        not stored twice.
        """
        self.reset()
        if not text:
            return
        if self._dedupe and self._entries and self._entries[-1] == text:
            return
        self._entries.append(text)
        if len(self._entries) > self._max_size:
            del self._entries[: len(self._entries) - self._max_size]

    def reset(self) -> None:
        self._index = None
        self._draft = ""
