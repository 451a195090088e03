"""Pytest configuration and shared fixtures."""
import pytest

from hank_tui.chat.transcript import Transcript
from hank_tui.config import Settings
from hank_tui.persistence.in_memory import InMemoryHistoryStore
from hank_tui.remote.in_memory import InMemoryRemoteStore
from hank_tui.session import ChatSession


@pytest.fixture(autouse=True)
def isolated_config_dir(tmp_path, monkeypatch):
    """Point the per-user config directory at a temporary path."""
    config_home = tmp_path / "config-home"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    monkeypatch.delenv("HANK_HOST", raising=False)
    monkeypatch.delenv("HANK_PORT", raising=False)
    return config_home / "hank-tui"


@pytest.fixture
def settings():
    """Return default settings."""
    return Settings()


@pytest.fixture
def remote_store():
    """Return an in-process remote store that echoes sends."""
    return InMemoryRemoteStore()


@pytest.fixture
def transcript():
    """Return an empty transcript."""
    return Transcript()


@pytest.fixture
def history_store():
    """Return an empty in-memory history store."""
    return InMemoryHistoryStore()


@pytest.fixture
def clipboard():
    """Return a fake clipboard whose contents tests can set."""
    class FakeClipboard:
        def __init__(self) -> None:
            self.text = ""
            self.error: Exception | None = None

        def __call__(self) -> str:
            if self.error is not None:
                raise self.error
            return self.text

    return FakeClipboard()


@pytest.fixture
def session(settings, remote_store, history_store, clipboard):
    """Return a chat session wired to in-memory backends."""
    chat = ChatSession(settings, remote_store, history_store, clipboard=clipboard)
    chat.resize_chat(40, 10)
    chat.resize_input(21, 3)
    return chat
