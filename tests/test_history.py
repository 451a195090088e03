"""Unit tests for sent-message history navigation."""
from hypothesis import given
from hypothesis import strategies as st

from hank_tui.editor.buffer import InputEditor, normalize_input
from hank_tui.editor.history import HistoryNavigator


def navigator_with(*entries: str) -> HistoryNavigator:
    history = HistoryNavigator()
    for entry in entries:
        history.record(entry)
    return history


class TestRecord:
    """Tests for remembering sent messages."""

    def test_record_appends(self):
        history = navigator_with("one", "two")
        assert history.entries == ("one", "two")

    def test_empty_message_is_not_recorded(self):
        history = navigator_with("one", "")
        assert history.entries == ("one",)

    def test_consecutive_duplicates_collapse(self):
        history = navigator_with("one", "one", "two", "one")
        assert history.entries == ("one", "two", "one")

    def test_duplicates_kept_when_dedupe_disabled(self):
        history = HistoryNavigator(dedupe=False)
        history.record("one")
        history.record("one")
        assert len(history) == 2

    def test_oldest_entries_dropped_past_cap(self):
        history = HistoryNavigator(max_size=3)
        for text in ["a", "b", "c", "d"]:
            history.record(text)
        assert history.entries == ("b", "c", "d")

    def test_initial_entries_are_capped(self):
        history = HistoryNavigator(entries=["a", "b", "c"], max_size=2)
        assert history.entries == ("b", "c")

    def test_record_stops_navigation(self):
        history = navigator_with("one")
        history.previous(InputEditor())
        history.record("two")
        assert not history.is_navigating


class TestNavigation:
    """Tests for browsing with previous/next."""

    def test_previous_on_empty_history_does_nothing(self):
        editor = InputEditor("draft")
        assert not HistoryNavigator().previous(editor)
        assert editor.text == "draft"

    def test_previous_shows_newest_first(self):
        history = navigator_with("one", "two")
        editor = InputEditor()
        history.previous(editor)
        assert editor.text == "two"
        assert history.index == 1

    def test_previous_clamps_at_oldest(self):
        history = navigator_with("one", "two")
        editor = InputEditor()
        for _ in range(5):
            history.previous(editor)
        assert editor.text == "one"
        assert history.index == 0

    def test_next_past_newest_restores_draft(self):
        history = navigator_with("one", "two")
        editor = InputEditor("my draft")
        history.previous(editor)
        history.previous(editor)
        history.next(editor)
        assert editor.text == "two"
        history.next(editor)
        assert editor.text == "my draft"
        assert not history.is_navigating

    def test_next_while_idle_does_nothing(self):
        history = navigator_with("one")
        editor = InputEditor("draft")
        assert not history.next(editor)
        assert editor.text == "draft"

    def test_shown_entry_puts_cursor_at_end(self):
        history = navigator_with("hello")
        editor = InputEditor()
        history.previous(editor)
        assert editor.cursor == len("hello")

    def test_editing_while_navigating_keeps_navigating(self):
        history = navigator_with("one", "two")
        editor = InputEditor()
        history.previous(editor)
        editor.insert("!")
        assert history.is_navigating
        history.previous(editor)
        assert editor.text == "one"

    def test_editing_a_shown_entry_does_not_change_history(self):
        history = navigator_with("one")
        editor = InputEditor()
        history.previous(editor)
        editor.insert(" more")
        history.next(editor)
        assert history.entries == ("one",)

    @given(
        st.lists(st.text(min_size=1, max_size=5), min_size=1, max_size=10),
        st.lists(st.booleans(), max_size=30),
    )
    def test_index_stays_in_bounds(self, entries, steps):
        """Property: the browse position never leaves the entry list."""
        history = HistoryNavigator(dedupe=False)
        for entry in entries:
            history.record(entry)
        editor = InputEditor()
        for backwards in steps:
            if backwards:
                history.previous(editor)
            else:
                history.next(editor)
            if history.index is not None:
                assert 0 <= history.index < len(history)
                assert editor.text == normalize_input(history.entries[history.index])
