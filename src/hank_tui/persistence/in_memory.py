"""In-memory history backend.

Data is lost when the application exits. Used when history is disabled
and in tests.
"""

from ..chat.models import ChatMessage
from ..config import TRANSCRIPT_SAVE_LIMIT
from .base import HistoryStore
from .models import ChatHistory


class InMemoryHistoryStore(HistoryStore):
    """History kept in a single attribute."""

    def __init__(
        self,
        history: ChatHistory | None = None,
        limit: int = TRANSCRIPT_SAVE_LIMIT,
    ) -> None:
        self._history = history
        self._limit = limit

    def load(self) -> ChatHistory | None:
        return self._history

    def save(self, server_url: str, messages: list[ChatMessage]) -> ChatHistory:
        self._history = ChatHistory.snapshot(server_url, messages, self._limit)
        return self._history

    def delete(self) -> None:
        self._history = None

    @property
    def backend_type(self) -> str:
        return "memory"
