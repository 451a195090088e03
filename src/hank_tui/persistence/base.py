"""Abstract base class for transcript history backends.

This module defines the interface for saving the transcript between runs.
The abstraction hides:
- Storage format (JSON file, in-memory)
- Where the data lives

Backends raise ``PersistenceError`` on any failure; callers log it and
carry on with an empty history.
"""

from abc import ABC, abstractmethod

from ..chat.models import ChatMessage
from .models import ChatHistory


class HistoryStore(ABC):
    """Persistent store for the most recent transcript."""

    @abstractmethod
    def load(self) -> ChatHistory | None:
        """Return the saved history, or None if nothing has been saved."""

    @abstractmethod
    def save(self, server_url: str, messages: list[ChatMessage]) -> ChatHistory:
        """Persist the newest messages of a transcript."""

    @abstractmethod
    def delete(self) -> None:
        """Remove any saved history."""

    @property
    @abstractmethod
    def backend_type(self) -> str:
        """Get the backend type identifier."""
