"""Custom Textual widgets for the TUI.

Hides widget implementation details:
- Transcript painting and mouse scrolling
- Input box painting and key capture
- Status bar formatting
- Log rendering and level filtering
"""

import logging
from datetime import datetime

from rich.text import Text
from textual import events
from textual.app import RenderResult
from textual.message import Message
from textual.widget import Widget
from textual.widgets import RichLog, Static

from ..chat.sync import ConnectionStatus
from ..session import ChatSession, Focus
from .config import LOG_MAX_MESSAGE_LENGTH, LOG_TIMESTAMP_FORMAT, MOUSE_SCROLL_LINES, LogLevel
from .formatting import input_text, transcript_line_text


class ChatView(Widget):
    """Scrollable transcript.

    Scroll state lives in the session; this widget only reports its size
    and paints the visible slice.
    """

    BORDER_TITLE = "Chat"

    def __init__(self, session: ChatSession, **kwargs) -> None:
        super().__init__(**kwargs)
        self._session = session

    def render(self) -> RenderResult:
        variables = self.app.get_css_variables()
        lines = self._session.visible_chat_lines()
        return Text("\n").join(transcript_line_text(line, variables) for line in lines)

    def on_resize(self, event: events.Resize) -> None:
        self._session.resize_chat(event.size.width, event.size.height)

    def on_mouse_scroll_up(self, event: events.MouseScrollUp) -> None:
        event.stop()
        self._session.scroll_chat(-MOUSE_SCROLL_LINES)
        self.refresh()

    def on_mouse_scroll_down(self, event: events.MouseScrollDown) -> None:
        event.stop()
        self._session.scroll_chat(MOUSE_SCROLL_LINES)
        self.refresh()


class InputView(Widget, can_focus=True):
    """Multi-line input box.

    Holds keyboard focus for the whole app and hands every key to the
    session through ``KeyPressed``, so the session decides what a key
    means for the current focus (input, chat or help).
    """

    BORDER_TITLE = "Input"

    class KeyPressed(Message):
        """Posted for every key that reaches the input box."""

        def __init__(self, key: str, character: str | None) -> None:
            super().__init__()
            self.key = key
            self.character = character

    class Pasted(Message):
        """Posted for a bracketed paste from the terminal."""

        def __init__(self, text: str) -> None:
            super().__init__()
            self.text = text

    def __init__(self, session: ChatSession, **kwargs) -> None:
        super().__init__(**kwargs)
        self._session = session

    def render(self) -> RenderResult:
        rows, cursor = self._session.visible_input()
        show_cursor = self._session.focus is Focus.INPUT
        return input_text(rows, cursor, show_cursor=show_cursor)

    def on_resize(self, event: events.Resize) -> None:
        self._session.resize_input(event.size.width, event.size.height)

    async def _on_key(self, event: events.Key) -> None:
        event.prevent_default()
        event.stop()
        self.post_message(self.KeyPressed(event.key, event.character))

    async def _on_paste(self, event: events.Paste) -> None:
        event.prevent_default()
        event.stop()
        if event.text:
            self.post_message(self.Pasted(event.text))


class StatusBar(Static):
    """One-line status: server, scroll position, history size, connection."""

    def show_status(self, session: ChatSession) -> None:
        self.update(session.status_line())
        self.set_class(session.status is ConnectionStatus.ERROR, "-error")
        self.set_class(session.status is ConnectionStatus.SENDING, "-sending")


class DebugPanel(RichLog):
    """Log panel for real-time tracing with level filtering.

    Shows timestamped records from all components.
    Supports standard log levels: DEBUG < INFO < WARNING < ERROR.
    Hidden by default, shown with --log-level flag or toggled with Ctrl+D.
    """

    BORDER_TITLE = "Log"
    BORDER_SUBTITLE = "Trace log"

    def __init__(self, *args, log_level: int = LogLevel.DEBUG, **kwargs) -> None:
        super().__init__(
            *args,
            markup=False,
            highlight=False,
            auto_scroll=True,
            wrap=False,
            **kwargs
        )
        self._log_level = log_level

    @property
    def log_level(self) -> int:
        """Current log level threshold."""
        return self._log_level

    @log_level.setter
    def log_level(self, level: int) -> None:
        self._log_level = level
        self._update_subtitle()

    def _update_subtitle(self) -> None:
        if self.display:
            self.border_subtitle = f"Level: {LogLevel.name(self._log_level)}"
        else:
            self.border_subtitle = "Hidden"

    def on_mount(self) -> None:
        """Hide by default."""
        self.display = False

    def add_entry(
        self,
        component: str,
        message: str,
        level: int = LogLevel.DEBUG
    ) -> None:
        """Add a log entry if it meets the current level threshold.

        Args:
            component: Component name (sync, http, session, etc.)
            message: Log message
            level: Log level (LogLevel.DEBUG, INFO, WARNING, ERROR)
        """
        if level < self._log_level:
            return

        timestamp = datetime.now().strftime(LOG_TIMESTAMP_FORMAT)
        if len(message) > LOG_MAX_MESSAGE_LENGTH:
            message = message[:LOG_MAX_MESSAGE_LENGTH] + "..."

        level_colors = {
            LogLevel.DEBUG: "dim white",
            LogLevel.INFO: "cyan",
            LogLevel.WARNING: "yellow",
            LogLevel.ERROR: "red",
        }
        component_colors = {
            "session": "cyan",
            "sync": "green",
            "transcript": "bright_green",
            "http": "magenta",
            "json_file": "blue",
            "config": "bright_yellow",
        }

        line = Text()
        line.append(f"{timestamp} ", "dim")
        line.append(f"{LogLevel.name(level):<7} ", level_colors.get(level, "white"))
        line.append(f"[{component}] ", component_colors.get(component, "white"))
        line.append(message)
        self.write(line)

    def show(self) -> None:
        """Show the log panel."""
        self.display = True
        self._update_subtitle()

    def hide(self) -> None:
        """Hide the log panel."""
        self.display = False
        self.border_subtitle = "Hidden"

    def toggle(self) -> bool:
        """Toggle visibility. Returns new state."""
        if self.display:
            self.hide()
            return False
        else:
            self.show()
            return True


class DebugPanelHandler(logging.Handler):
    """Forwards log records to a DebugPanel.

    The component shown is the last part of the logger name, so
    ``hank_tui.chat.sync`` appears as ``[sync]``.
    """

    def __init__(self, panel: DebugPanel, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self._panel = panel

    def emit(self, record: logging.LogRecord) -> None:
        if not self._panel.is_attached:
            return
        try:
            message = record.getMessage()
            if record.exc_info:
                message = f"{message} ({record.exc_info[1]!r})"
        except (TypeError, ValueError):
            self.handleError(record)
            return
        component = record.name.rsplit(".", 1)[-1]
        self._panel.add_entry(component, message, LogLevel.nearest(record.levelno))
