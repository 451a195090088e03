"""Chat session state and key handling.

Hides how the pieces of the client are wired together: the input editor,
sent-message history, transcript, scroll state, sync coordinator and
history persistence all live in one ``ChatSession``, and every keystroke
goes through ``handle_key``. The UI layer only forwards keys and paints
what the session exposes, so the whole interaction can be driven without
a terminal.
"""

import logging
from collections.abc import Callable
from enum import Enum

import pyperclip

from .chat.layout import TranscriptLine, render_transcript
from .chat.scroll import ScrollController
from .chat.sync import ConnectionStatus, SyncCoordinator
from .chat.transcript import Transcript
from .config import TRANSCRIPT_SAVE_LIMIT, Settings
from .editor.buffer import Direction, InputEditor
from .editor.history import HistoryNavigator
from .editor.wrap import DisplayLine
from .errors import PersistenceError
from .persistence.base import HistoryStore
from .remote.base import RemoteStore

logger = logging.getLogger(__name__)

SAVED_AT_FORMAT = "%Y-%m-%d %H:%M:%S"


class Focus(str, Enum):
    """Which part of the screen receives keys."""

    INPUT = "input"
    CHAT = "chat"
    HELP = "help"


class KeyOutcome(str, Enum):
    """Result of dispatching one key."""

    HANDLED = "handled"
    IGNORED = "ignored"
    QUIT = "quit"


QUIT_KEYS = frozenset({"escape", "ctrl+c"})
SEND_KEYS = frozenset({"enter", "ctrl+s"})
NEWLINE_KEYS = frozenset({"shift+enter", "alt+enter", "ctrl+j"})

_CURSOR_KEYS = {
    "left": Direction.LEFT,
    "right": Direction.RIGHT,
    "up": Direction.UP,
    "down": Direction.DOWN,
    "home": Direction.HOME,
    "end": Direction.END,
}


class ChatSession:
    """All client state, mutated only from the UI's event loop.

    Args:
        settings: Resolved client settings
        store: Remote message store
        history_store: Transcript persistence; ignored when history is disabled
        clipboard: Callable returning clipboard text (defaults to pyperclip)
    """

    def __init__(
        self,
        settings: Settings,
        store: RemoteStore,
        history_store: HistoryStore | None = None,
        clipboard: Callable[[], str] | None = None,
    ) -> None:
        self.settings = settings
        self.editor = InputEditor()
        self.history = HistoryNavigator()
        self.transcript = Transcript()
        self.scroll = ScrollController()
        self.coordinator = SyncCoordinator(store, self.transcript, settings.send_timeout)
        self.history_store = history_store if settings.history_enabled else None
        self.focus = Focus.INPUT
        self._focus_before_help = Focus.INPUT
        self._clipboard = clipboard or pyperclip.paste

        self.chat_width = 80
        self.input_width = 80
        self.input_height = 3
        # Client-side problems (clipboard, history file); server ones live on the coordinator
        self.local_error: str | None = None

        self._layout: list[TranscriptLine] = []
        self._layout_key: tuple | None = None

    @property
    def server_url(self) -> str:
        return self.settings.server_url

    @property
    def status(self) -> ConnectionStatus:
        return self.coordinator.status

    @property
    def last_error(self) -> str | None:
        return self.local_error or self.coordinator.last_error

    @property
    def thinking(self) -> bool:
        return self.coordinator.sending

    # Lifecycle

    def startup(self) -> None:
        """Restore saved history and announce the connection."""
        url = self.server_url
        if self.history_store is None:
            self.transcript.add_notice(f"Connected to {url} (history disabled)")
            return

        try:
            history = self.history_store.load()
        except PersistenceError as e:
            logger.warning("Starting with empty history: %s", e)
            history = None

        if history is None:
            notice = f"Connected to {url} (history enabled)"
        elif history.belongs_to(url):
            self.transcript.restore(history.messages)
            notice = (
                f"History loaded ({len(history.messages)} messages) - "
                f"{history.saved_at.strftime(SAVED_AT_FORMAT)}"
            )
        else:
            logger.info("Saved history belongs to %s, not loading it", history.server_url)
            notice = f"New session for {url}"
        self.transcript.add_notice(notice)

    def poll(self) -> bool:
        """Start a fetch unless one is already outstanding."""
        return self.coordinator.request_fetch()

    def save_history(self) -> bool:
        """Persist the newest messages. Returns False if nothing was saved."""
        if self.history_store is None:
            return False
        try:
            self.history_store.save(self.server_url, self.transcript.tail(TRANSCRIPT_SAVE_LIMIT))
        except PersistenceError as e:
            logger.error("Could not save history: %s", e)
            return False
        return True

    async def shutdown(self) -> None:
        """Cancel outstanding requests, save history and close the store."""
        await self.coordinator.aclose()
        self.save_history()
        await self.coordinator.store.close()

    # Geometry

    def resize_chat(self, width: int, height: int) -> None:
        self.chat_width = max(1, width)
        self.scroll.set_viewport_height(height)
        self.chat_lines()

    def resize_input(self, width: int, height: int) -> None:
        self.input_width = max(1, width)
        self.input_height = max(1, height)
        self.editor.follow_cursor(self.input_wrap_width, self.input_height)

    @property
    def input_wrap_width(self) -> int:
        """Wrap width for the editor; the last column is kept for the cursor."""
        return max(1, self.input_width - 1)

    # View data

    def chat_lines(self) -> list[TranscriptLine]:
        """Return the laid-out transcript, re-laying out only when it changed."""
        key = (
            self.transcript.version,
            self.chat_width,
            self.thinking,
            self.last_error,
        )
        if key != self._layout_key:
            self._layout = render_transcript(
                self.transcript,
                self.chat_width,
                assistant_name=self.settings.assistant_name,
                thinking=self.thinking,
                last_error=self.last_error,
            )
            self._layout_key = key
            self.scroll.set_total_lines(len(self._layout))
        return self._layout

    def visible_chat_lines(self) -> list[TranscriptLine]:
        lines = self.chat_lines()
        start, stop = self.scroll.visible_range()
        return lines[start:stop]

    def visible_input(self) -> tuple[list[DisplayLine], tuple[int, int]]:
        """Return the input rows on screen and the cursor's (row, column) within them."""
        width = self.input_wrap_width
        lines = self.editor.lines(width)
        top = self.editor.follow_cursor(width, self.input_height)
        row, column = self.editor.cursor_position(width)
        return lines[top : top + self.input_height], (row - top, column)

    def status_line(self) -> str:
        scroll_info = ""
        if self.focus is Focus.CHAT and not self.scroll.auto_follow:
            scroll_info = f" Scroll: {self.scroll.offset} |"
        return (
            f" {self.server_url} |{scroll_info} "
            f"History: {len(self.history)} | {self.status.value}"
        )

    # Actions

    def submit(self) -> bool:
        """Send the editor contents. Blank input is not sent."""
        text = self.editor.text.strip()
        if not text:
            return False
        self.history.record(text)
        self.local_error = None
        self.coordinator.request_send(text)
        self.editor.clear()
        self.scroll.follow()
        return True

    def paste(self, text: str | None = None) -> bool:
        """Insert ``text``, or the clipboard contents when not given."""
        if self.focus is not Focus.INPUT:
            return False
        if text is None:
            try:
                text = self._clipboard()
            except pyperclip.PyperclipException as e:
                self.local_error = f"Clipboard error: {e}"
                return False
        if not text:
            self.local_error = "Clipboard is empty or unavailable"
            return False
        self.local_error = None
        self.editor.insert(text)
        self._follow_input()
        return True

    def clear_chat(self) -> None:
        """Empty the transcript here and on the server."""
        self.coordinator.request_clear()
        self.local_error = None
        self.transcript.add_notice(f"Chat cleared. Connected to {self.server_url}")
        self.scroll.follow()

    def delete_history(self) -> bool:
        """Delete the saved history file."""
        if self.history_store is None:
            self.local_error = "History is disabled (--no-history)"
            return False
        try:
            self.history_store.delete()
        except PersistenceError as e:
            self.local_error = f"Could not delete history: {e}"
            return False
        self.local_error = None
        self.transcript.add_notice("Chat history deleted.")
        self.scroll.follow()
        return True

    def toggle_focus(self) -> None:
        if self.focus is Focus.INPUT:
            self.focus = Focus.CHAT
        elif self.focus is Focus.CHAT:
            self.focus = Focus.INPUT

    def toggle_help(self) -> None:
        if self.focus is Focus.HELP:
            self.focus = self._focus_before_help
        else:
            self._focus_before_help = self.focus
            self.focus = Focus.HELP

    def scroll_chat(self, lines: int) -> None:
        """Scroll the transcript; negative is up."""
        self.chat_lines()
        if lines < 0:
            self.scroll.scroll_up(-lines)
        else:
            self.scroll.scroll_down(lines)

    # Key dispatch

    def handle_key(self, key: str, character: str | None = None) -> KeyOutcome:
        """Apply one key press.

        Args:
            key: Textual key name, e.g. ``"ctrl+up"`` or ``"a"``
            character: Printable character for the key, if any
        """
        if self.focus is Focus.HELP:
            self.toggle_help()
            return KeyOutcome.HANDLED
        if key in QUIT_KEYS:
            return KeyOutcome.QUIT
        if self._handle_global(key, character):
            return KeyOutcome.HANDLED
        if self.focus is Focus.INPUT:
            return self._handle_input(key, character)
        if self.focus is Focus.CHAT:
            return self._handle_chat(key, character)
        raise ValueError(f"Unknown focus: {self.focus}")

    def _handle_global(self, key: str, character: str | None) -> bool:
        if key == "f1":
            self.toggle_help()
        elif key == "tab":
            self.toggle_focus()
        elif key == "ctrl+l":
            self.clear_chat()
        elif key == "ctrl+shift+d":
            self.delete_history()
        elif key == "alt+up":
            self.scroll_chat(-1)
        elif key == "alt+down":
            self.scroll_chat(1)
        elif key == "pageup":
            self.chat_lines()
            self.scroll.page_up()
        elif key == "pagedown":
            self.chat_lines()
            self.scroll.page_down()
        else:
            return False
        return True

    def _handle_input(self, key: str, character: str | None) -> KeyOutcome:
        width = self.input_wrap_width
        if key in SEND_KEYS:
            self.submit()
        elif key in NEWLINE_KEYS:
            self.editor.insert_newline()
        elif key == "backspace":
            self.editor.delete_backward()
        elif key == "delete":
            self.editor.delete_forward()
        elif key in _CURSOR_KEYS:
            self.editor.move_cursor(_CURSOR_KEYS[key], width)
        elif key == "ctrl+up":
            self.history.previous(self.editor)
        elif key == "ctrl+down":
            self.history.next(self.editor)
        elif key == "ctrl+v":
            self.paste()
        elif character is not None and character.isprintable():
            self.editor.insert(character)
        else:
            return KeyOutcome.IGNORED
        self._follow_input()
        return KeyOutcome.HANDLED

    def _handle_chat(self, key: str, character: str | None) -> KeyOutcome:
        self.chat_lines()
        if key == "home":
            self.scroll.home()
        elif key == "end":
            self.scroll.end()
        elif key == "up":
            self.scroll.scroll_up()
        elif key == "down":
            self.scroll.scroll_down()
        elif character == "?":
            self.toggle_help()
        else:
            return KeyOutcome.IGNORED
        return KeyOutcome.HANDLED

    def _follow_input(self) -> None:
        self.editor.follow_cursor(self.input_wrap_width, self.input_height)
