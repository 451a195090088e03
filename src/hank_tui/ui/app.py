"""Main Textual TUI application.

Orchestrates the UI components: forwards keys and pastes to the chat
session, drives the poll timer and the sync worker, and repaints after
every change.
"""

import asyncio
import logging

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer, Header

from ..chat.events import SyncEvent
from ..config import Settings
from ..logging_utils import PACKAGE_LOGGER
from ..persistence import HistoryStore, create_history_store
from ..remote import RemoteStore, create_remote_store
from ..session import ChatSession, Focus, KeyOutcome
from .screens import HelpScreen
from .styles import APP_CSS
from .themes import HANK_MOCHA
from .widgets import ChatView, DebugPanel, DebugPanelHandler, InputView, LogLevel, StatusBar

logger = logging.getLogger(__name__)

INPUT_TITLE = "Input (Enter: send, Shift+Enter: newline, F1: help)"
INPUT_TITLE_SENDING = "Input (waiting for reply...)"


class HankApp(App):
    """Textual TUI for chatting with a Hank server."""

    CSS = APP_CSS
    TITLE = "Hank"
    ENABLE_COMMAND_PALETTE = False

    BINDINGS = [
        Binding("ctrl+q", "quit_app", "Quit", priority=True),
        Binding("ctrl+d", "toggle_debug", "Debug", priority=True),
    ]

    def __init__(
        self,
        session: ChatSession,
        log_level: str | None = None,
    ) -> None:
        super().__init__()
        self.session = session
        self._log_level = log_level
        self._log_handler: DebugPanelHandler | None = None
        self._help_open = False
        self._shutting_down = False

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield ChatView(self.session, id="chat-view")
        yield InputView(self.session, id="input-view")
        yield StatusBar(id="status-bar")
        yield DebugPanel(id="debug-panel")
        yield Footer()

    def on_mount(self) -> None:
        """Called when app is mounted."""
        self.register_theme(HANK_MOCHA)
        self.theme = "hank-mocha"

        log_panel = self.query_one("#debug-panel", DebugPanel)
        self._log_handler = DebugPanelHandler(log_panel)
        logging.getLogger(PACKAGE_LOGGER).addHandler(self._log_handler)
        if self._log_level is not None:
            log_panel.log_level = LogLevel.from_string(self._log_level)
            log_panel.show()
            logger.info("Log panel enabled with level: %s", self._log_level.upper())

        self.sub_title = self.session.server_url
        self.session.startup()

        self.set_interval(self.session.settings.poll_interval, self._poll)
        self.run_worker(
            self.session.coordinator.run(self._on_sync_change),
            name="sync",
            group="sync",
            exclusive=True,
        )
        self.session.poll()
        self.query_one("#input-view", InputView).focus()
        self._refresh_views()

    def on_unmount(self) -> None:
        """Detach the log handler so records stop reaching a dead panel."""
        if self._log_handler is not None:
            logging.getLogger(PACKAGE_LOGGER).removeHandler(self._log_handler)
            self._log_handler = None

    # Sync

    def _poll(self) -> None:
        if self.session.poll():
            logger.debug("Poll since %d", self.session.transcript.high_water_mark)

    def _on_sync_change(self, event: SyncEvent) -> None:
        self._refresh_views()

    # Input

    async def on_input_view_key_pressed(self, message: InputView.KeyPressed) -> None:
        outcome = self.session.handle_key(message.key, message.character)
        if outcome is KeyOutcome.QUIT:
            await self.action_quit_app()
            return
        if outcome is KeyOutcome.HANDLED:
            self._sync_help()
            self._refresh_views()

    def on_input_view_pasted(self, message: InputView.Pasted) -> None:
        self.session.paste(message.text)
        self._refresh_views()

    def _sync_help(self) -> None:
        if self.session.focus is Focus.HELP and not self._help_open:
            self._help_open = True
            self.push_screen(HelpScreen(), self._on_help_closed)

    def _on_help_closed(self, result: None = None) -> None:
        self._help_open = False
        if self.session.focus is Focus.HELP:
            self.session.toggle_help()
        self._refresh_views()

    # Painting

    def _refresh_views(self) -> None:
        session = self.session
        chat = self.query_one("#chat-view", ChatView)
        input_view = self.query_one("#input-view", InputView)
        status = self.query_one("#status-bar", StatusBar)

        chat.set_class(session.focus is Focus.CHAT, "-active")
        input_view.set_class(session.focus is Focus.INPUT, "-active")
        input_view.set_class(session.thinking, "-sending")

        if session.scroll.auto_follow:
            chat.border_subtitle = ""
        else:
            chat.border_subtitle = f"line {session.scroll.offset + 1}/{session.scroll.total_lines}"
        input_view.border_title = INPUT_TITLE_SENDING if session.thinking else INPUT_TITLE
        input_view.border_subtitle = f"{len(session.editor)} chars" if not session.editor.is_empty() else ""

        chat.refresh()
        input_view.refresh()
        status.show_status(session)

    # Actions

    def action_toggle_debug(self) -> None:
        """Toggle the log panel visibility."""
        log_panel = self.query_one("#debug-panel", DebugPanel)
        is_visible = log_panel.toggle()
        self.notify(f"Log panel {'shown' if is_visible else 'hidden'}", timeout=2)

    async def action_help_quit(self) -> None:
        await self.action_quit_app()

    async def action_quit_app(self) -> None:
        """Save history, close the connection and exit."""
        if self._shutting_down:
            return
        self._shutting_down = True
        await self.session.shutdown()
        self.exit()


async def run_tui(
    settings: Settings,
    backend: str = "http",
    log_level: str | None = None,
    store: RemoteStore | None = None,
    history_store: HistoryStore | None = None,
) -> None:
    """Run the Textual TUI.

    Args:
        settings: Resolved client settings
        backend: Remote store backend ("http" or "memory") when no store is given
        log_level: Log level for panel (debug/info/warning/error), None to hide
        store: Remote store to use instead of creating one
        history_store: History backend to use instead of the JSON file
    """
    if store is None:
        if backend == "http":
            store = create_remote_store(
                "http",
                base_url=settings.server_url,
                fetch_timeout=settings.fetch_timeout,
                send_timeout=settings.send_timeout,
            )
        else:
            store = create_remote_store(backend)
    if history_store is None and settings.history_enabled:
        history_store = create_history_store("json")

    session = ChatSession(settings, store, history_store)
    app = HankApp(session, log_level=log_level)
    try:
        await app.run_async()
    except (KeyboardInterrupt, asyncio.CancelledError):
        pass
    finally:
        if not app._shutting_down:
            await session.shutdown()
