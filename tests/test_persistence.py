"""Tests for transcript persistence backends."""
import json

import pytest

from hank_tui.chat.models import ChatMessage, MessageStatus, Role
from hank_tui.errors import PersistenceError
from hank_tui.persistence import ChatHistory, create_history_store
from hank_tui.persistence.in_memory import InMemoryHistoryStore
from hank_tui.persistence.json_file import JsonHistoryStore

URL = "http://localhost:8080"


def confirmed(text: str, timestamp: int, role: Role = Role.USER) -> ChatMessage:
    return ChatMessage(role=role, text=text, timestamp=timestamp)


class TestChatHistory:
    """Tests for the persisted model."""

    def test_snapshot_excludes_pending(self):
        messages = [
            confirmed("a", 1),
            ChatMessage(role=Role.USER, text="b", status=MessageStatus.PENDING),
        ]
        history = ChatHistory.snapshot(URL, messages)
        assert [m.text for m in history.messages] == ["a"]

    def test_snapshot_keeps_newest(self):
        messages = [confirmed(str(i), i) for i in range(1, 6)]
        history = ChatHistory.snapshot(URL, messages, limit=2)
        assert [m.text for m in history.messages] == ["4", "5"]

    def test_belongs_to_ignores_trailing_slash(self):
        history = ChatHistory(server_url=URL + "/")
        assert history.belongs_to(URL)
        assert not history.belongs_to("http://other:8080")


class TestJsonHistoryStore:
    """Tests for the JSON file backend."""

    @pytest.fixture
    def store(self, tmp_path):
        return JsonHistoryStore(tmp_path / "nested" / "history.json")

    def test_load_missing_file(self, store):
        assert store.load() is None

    def test_save_then_load(self, store):
        notice = ChatMessage(role=Role.SYSTEM, text="note", status=MessageStatus.LOCAL)
        store.save(URL, [confirmed("hi", 1), confirmed("Echo: hi", 2, Role.ASSISTANT), notice])

        loaded = store.load()
        assert loaded.server_url == URL
        assert [(m.role, m.text) for m in loaded.messages] == [
            (Role.USER, "hi"),
            (Role.ASSISTANT, "Echo: hi"),
            (Role.SYSTEM, "note"),
        ]
        assert loaded.messages[2].status == MessageStatus.LOCAL

    def test_file_is_json(self, store):
        store.save(URL, [confirmed("hi", 1)])
        data = json.loads(store.path.read_text(encoding="utf-8"))
        assert data["server_url"] == URL
        assert data["messages"][0]["text"] == "hi"

    def test_save_respects_limit(self, tmp_path):
        store = JsonHistoryStore(tmp_path / "history.json", limit=3)
        store.save(URL, [confirmed(str(i), i) for i in range(10)])
        assert [m.text for m in store.load().messages] == ["7", "8", "9"]

    def test_corrupt_file_raises(self, store):
        store.path.parent.mkdir(parents=True)
        store.path.write_text("{not json", encoding="utf-8")
        with pytest.raises(PersistenceError):
            store.load()

    def test_undecodable_file_raises(self, store):
        store.path.parent.mkdir(parents=True)
        store.path.write_bytes(b"\xff\xfe{not utf8")
        with pytest.raises(PersistenceError):
            store.load()

    def test_delete(self, store):
        store.save(URL, [confirmed("hi", 1)])
        store.delete()
        assert not store.path.exists()
        store.delete()

    def test_default_path_is_in_config_dir(self, isolated_config_dir):
        assert JsonHistoryStore().path == isolated_config_dir / "history.json"


class TestInMemoryHistoryStore:
    """Tests for the in-memory backend."""

    def test_round_trip_and_delete(self, history_store):
        assert history_store.load() is None
        history_store.save(URL, [confirmed("hi", 1)])
        assert history_store.load().messages[0].text == "hi"
        history_store.delete()
        assert history_store.load() is None


class TestFactory:
    """Tests for create_history_store."""

    def test_json_backend(self, tmp_path):
        store = create_history_store("json", path=tmp_path / "h.json")
        assert store.backend_type == "json"

    def test_memory_backend(self):
        store = create_history_store("memory")
        assert isinstance(store, InMemoryHistoryStore)
        assert store.backend_type == "memory"

    def test_unknown_backend(self):
        with pytest.raises(ValueError, match="Unsupported"):
            create_history_store("sqlite")
