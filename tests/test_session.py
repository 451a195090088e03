"""Tests for the chat session: key dispatch, actions and lifecycle."""
import pyperclip
import pytest

from hank_tui.chat.models import ChatMessage, MessageStatus, Role
from hank_tui.config import Settings
from hank_tui.errors import PersistenceError
from hank_tui.persistence.in_memory import InMemoryHistoryStore
from hank_tui.persistence.models import ChatHistory
from hank_tui.session import ChatSession, Focus, KeyOutcome

URL = "http://localhost:8080"


def type_text(session: ChatSession, text: str) -> None:
    for character in text:
        session.handle_key(character, character)


class BrokenHistoryStore(InMemoryHistoryStore):
    """History backend whose every operation fails."""

    def load(self):
        raise PersistenceError("disk on fire")

    def save(self, server_url, messages):
        raise PersistenceError("disk on fire")

    def delete(self):
        raise PersistenceError("disk on fire")


class TestStartup:
    """Tests for the start-up notice and history restore."""

    def test_no_saved_history(self, session):
        session.startup()
        assert session.transcript.messages[-1].text == f"Connected to {URL} (history enabled)"

    def test_history_disabled(self, remote_store, history_store):
        session = ChatSession(Settings(history_enabled=False), remote_store, history_store)
        session.startup()
        assert session.history_store is None
        assert session.transcript.messages[-1].text == f"Connected to {URL} (history disabled)"

    def test_restores_matching_history(self, settings, remote_store):
        saved = ChatHistory(
            server_url=URL,
            messages=[ChatMessage(role=Role.USER, text="earlier", timestamp=5)],
        )
        session = ChatSession(settings, remote_store, InMemoryHistoryStore(saved))
        session.startup()

        texts = [m.text for m in session.transcript]
        assert texts[0] == "earlier"
        assert texts[1].startswith("History loaded (1 messages) - ")
        assert session.transcript.high_water_mark == 5

    def test_history_for_other_server_is_not_loaded(self, settings, remote_store):
        saved = ChatHistory(
            server_url="http://elsewhere:9000",
            messages=[ChatMessage(role=Role.USER, text="earlier", timestamp=5)],
        )
        session = ChatSession(settings, remote_store, InMemoryHistoryStore(saved))
        session.startup()
        assert [m.text for m in session.transcript] == [f"New session for {URL}"]

    def test_unreadable_history_starts_empty(self, settings, remote_store):
        session = ChatSession(settings, remote_store, BrokenHistoryStore())
        session.startup()
        assert [m.text for m in session.transcript] == [f"Connected to {URL} (history enabled)"]


class TestInputKeys:
    """Tests for keys while the input box has focus."""

    def test_typing_inserts_characters(self, session):
        type_text(session, "hi there")
        assert session.editor.text == "hi there"

    def test_non_printable_key_is_ignored(self, session):
        assert session.handle_key("f5") == KeyOutcome.IGNORED
        assert session.editor.is_empty()

    @pytest.mark.parametrize("key", ["shift+enter", "alt+enter", "ctrl+j"])
    def test_newline_keys(self, session, key):
        type_text(session, "a")
        session.handle_key(key)
        type_text(session, "b")
        assert session.editor.text == "a\nb"

    def test_backspace_and_delete(self, session):
        type_text(session, "abc")
        session.handle_key("backspace")
        session.handle_key("home")
        session.handle_key("delete")
        assert session.editor.text == "b"

    @pytest.mark.parametrize("key", ["escape", "ctrl+c"])
    def test_quit_keys(self, session, key):
        assert session.handle_key(key) == KeyOutcome.QUIT

    def test_blank_input_is_not_sent(self, session):
        type_text(session, "   ")
        session.handle_key("enter")
        assert len(session.transcript) == 0
        assert session.editor.text == "   "

    @pytest.mark.asyncio
    @pytest.mark.parametrize("key", ["enter", "ctrl+s"])
    async def test_send_keys_submit(self, session, key):
        type_text(session, "  hello  ")
        assert session.handle_key(key) == KeyOutcome.HANDLED
        assert session.editor.is_empty()
        assert [m.text for m in session.transcript] == ["hello"]
        assert session.transcript.messages[0].status == MessageStatus.PENDING
        assert session.history.entries == ("hello",)
        await session.coordinator.settle()
        assert [m.text for m in session.transcript] == ["hello", "Echo: hello"]

    @pytest.mark.asyncio
    async def test_history_recall(self, session):
        for text in ["first", "second"]:
            type_text(session, text)
            session.handle_key("enter")
        session.handle_key("ctrl+up")
        assert session.editor.text == "second"
        session.handle_key("ctrl+up")
        assert session.editor.text == "first"
        session.handle_key("ctrl+down")
        session.handle_key("ctrl+down")
        assert session.editor.text == ""
        await session.coordinator.aclose()

    def test_cursor_keys_move_cursor(self, session):
        type_text(session, "abc")
        session.handle_key("left")
        session.handle_key("left")
        type_text(session, "X")
        assert session.editor.text == "aXbc"

    def test_long_input_scrolls_to_cursor(self, session):
        session.paste("a\nb\nc\nd\ne\nf")
        rows, cursor = session.visible_input()
        assert [row.text for row in rows] == ["d", "e", "f"]
        assert cursor == (2, 1)

    def test_input_wraps_one_column_early(self, session):
        type_text(session, "x" * 20)
        rows, cursor = session.visible_input()
        assert [row.text for row in rows] == ["x" * 20]
        type_text(session, "y")
        rows, cursor = session.visible_input()
        assert [row.text for row in rows] == ["x" * 20, "y"]
        assert cursor == (1, 1)


class TestPaste:
    """Tests for clipboard paste."""

    def test_paste_from_clipboard(self, session, clipboard):
        clipboard.text = "one\r\ntwo\tthree"
        session.handle_key("ctrl+v")
        assert session.editor.text == "one\ntwo    three"
        assert session.last_error is None

    def test_empty_clipboard(self, session, clipboard):
        session.handle_key("ctrl+v")
        assert session.last_error == "Clipboard is empty or unavailable"

    def test_clipboard_failure(self, session, clipboard):
        clipboard.error = pyperclip.PyperclipException("no backend")
        session.handle_key("ctrl+v")
        assert session.last_error == "Clipboard error: no backend"
        assert session.editor.is_empty()

    def test_bracketed_paste_text(self, session):
        assert session.paste("pasted")
        assert session.editor.text == "pasted"

    def test_paste_ignored_outside_input(self, session):
        session.toggle_focus()
        assert not session.paste("pasted")
        assert session.editor.is_empty()


class TestChatFocus:
    """Tests for keys while the transcript has focus."""

    @pytest.fixture
    def long_session(self, session):
        for index in range(10):
            session.transcript.add_notice(f"notice {index}")
        session.chat_lines()
        session.handle_key("tab")
        return session

    def test_tab_toggles_focus(self, session):
        session.handle_key("tab")
        assert session.focus is Focus.CHAT
        session.handle_key("tab")
        assert session.focus is Focus.INPUT

    def test_typing_in_chat_focus_does_not_edit(self, session):
        session.handle_key("tab")
        assert session.handle_key("a", "a") == KeyOutcome.IGNORED
        assert session.editor.is_empty()

    def test_arrow_keys_scroll(self, long_session):
        bottom = long_session.scroll.offset
        long_session.handle_key("up")
        assert long_session.scroll.offset == bottom - 1
        assert not long_session.scroll.auto_follow
        long_session.handle_key("home")
        assert long_session.scroll.offset == 0
        long_session.handle_key("end")
        assert long_session.scroll.offset == bottom

    def test_status_line_shows_scroll_offset(self, long_session):
        long_session.handle_key("home")
        assert long_session.status_line() == f" {URL} | Scroll: 0 | History: 0 | Connected"

    def test_page_keys_work_from_input_focus(self, long_session):
        long_session.handle_key("tab")
        bottom = long_session.scroll.offset
        long_session.handle_key("pageup")
        assert long_session.scroll.offset == max(0, bottom - 10)
        long_session.handle_key("alt+down")
        assert long_session.scroll.offset == max(0, bottom - 10) + 1

    def test_visible_lines_fit_viewport(self, long_session):
        assert len(long_session.visible_chat_lines()) == 10


class TestHelp:
    """Tests for the help overlay."""

    def test_f1_opens_and_any_key_closes(self, session):
        session.handle_key("f1")
        assert session.focus is Focus.HELP
        assert session.handle_key("x", "x") == KeyOutcome.HANDLED
        assert session.focus is Focus.INPUT
        assert session.editor.is_empty()

    def test_question_mark_in_chat_focus(self, session):
        session.handle_key("tab")
        session.handle_key("?", "?")
        assert session.focus is Focus.HELP
        session.handle_key("escape")
        assert session.focus is Focus.CHAT

    def test_quit_key_only_closes_help(self, session):
        session.handle_key("f1")
        assert session.handle_key("ctrl+c") == KeyOutcome.HANDLED


class TestClearAndDelete:
    """Tests for clearing the chat and deleting saved history."""

    @pytest.mark.asyncio
    async def test_ctrl_l_clears_both_sides(self, session, remote_store):
        type_text(session, "hello")
        session.handle_key("enter")
        await session.coordinator.settle()

        session.handle_key("ctrl+l")
        assert [m.text for m in session.transcript] == [f"Chat cleared. Connected to {URL}"]
        await session.coordinator.settle()
        assert remote_store.messages == []

    def test_delete_history(self, session, history_store):
        history_store.save(URL, [])
        session.handle_key("ctrl+shift+d")
        assert history_store.load() is None
        assert session.transcript.messages[-1].text == "Chat history deleted."

    def test_delete_history_when_disabled(self, remote_store):
        session = ChatSession(Settings(history_enabled=False), remote_store)
        assert not session.delete_history()
        assert session.last_error == "History is disabled (--no-history)"

    def test_delete_history_failure(self, settings, remote_store):
        session = ChatSession(settings, remote_store, BrokenHistoryStore())
        assert not session.delete_history()
        assert session.last_error == "Could not delete history: disk on fire"


class TestRendering:
    """Tests for view data."""

    def test_status_line(self, session):
        assert session.status_line() == f" {URL} | History: 0 | Connected"

    @pytest.mark.asyncio
    async def test_thinking_line_while_sending(self, session):
        type_text(session, "hi")
        session.handle_key("enter")
        assert session.thinking
        assert session.chat_lines()[-1].text == "Hank is thinking..."
        assert session.status_line().endswith("Sending...")
        await session.coordinator.settle()
        assert not session.thinking

    def test_layout_is_cached(self, session):
        assert session.chat_lines() is session.chat_lines()


class TestShutdown:
    """Tests for saving on exit."""

    @pytest.mark.asyncio
    async def test_shutdown_saves_history_and_closes_store(self, session, history_store, remote_store):
        type_text(session, "hello")
        session.handle_key("enter")
        await session.coordinator.settle()
        await session.shutdown()

        saved = history_store.load()
        assert saved.server_url == URL
        assert [m.text for m in saved.messages] == ["hello", "Echo: hello"]
        assert remote_store.closed

    @pytest.mark.asyncio
    async def test_shutdown_skips_pending_sends(self, session, history_store):
        session.transcript.add_pending("not yet")
        await session.shutdown()
        assert history_store.load().messages == []

    @pytest.mark.asyncio
    async def test_save_failure_is_not_fatal(self, settings, remote_store):
        session = ChatSession(settings, remote_store, BrokenHistoryStore())
        await session.shutdown()
        assert not session.save_history()
        assert remote_store.closed
