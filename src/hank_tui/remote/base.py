"""Abstract base class for remote chat stores.

This module defines the interface the sync coordinator talks to.
The abstraction hides:
- Transport (HTTP, in-process)
- Wire format and decoding
- Connection management and timeouts

Implementations raise the ``RemoteStoreError`` family from
``hank_tui.errors`` and nothing else.
"""

from abc import ABC, abstractmethod
from typing import Any

from ..chat.models import ChatReply, ServerMessage


class RemoteStore(ABC):
    """Remote message store the client polls and posts to."""

    @property
    @abstractmethod
    def base_url(self) -> str:
        """Address of the store, used to match persisted history."""

    @abstractmethod
    async def fetch_messages(self, since: int) -> list[ServerMessage]:
        """Return all messages with a timestamp strictly greater than ``since``."""

    @abstractmethod
    async def send_message(self, text: str, timeout: float | None = None) -> ChatReply:
        """Post a user message and return the assistant's reply."""

    @abstractmethod
    async def clear_messages(self) -> None:
        """Empty the server-side history."""

    @abstractmethod
    async def close(self) -> None:
        """Release connections."""

    async def __aenter__(self) -> "RemoteStore":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
