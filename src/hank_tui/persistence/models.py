"""Data models for transcript persistence.

These models define what is written to disk, independent of the storage
backend used.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from ..chat.models import ChatMessage
from ..config import TRANSCRIPT_SAVE_LIMIT


class ChatHistory(BaseModel):
    """Saved transcript for one server.

    Only the newest ``TRANSCRIPT_SAVE_LIMIT`` messages are kept.
    """

    server_url: str = Field(description="Server the transcript belongs to")
    messages: list[ChatMessage] = Field(default_factory=list)
    saved_at: datetime = Field(default_factory=datetime.now)

    @classmethod
    def snapshot(
        cls,
        server_url: str,
        messages: list[ChatMessage],
        limit: int = TRANSCRIPT_SAVE_LIMIT,
    ) -> "ChatHistory":
        """Build a history from the newest ``limit`` messages, unconfirmed sends excluded."""
        kept = [m for m in messages if not m.is_pending]
        return cls(server_url=server_url, messages=kept[-limit:] if limit > 0 else [])

    def belongs_to(self, server_url: str) -> bool:
        return self.server_url.rstrip("/") == server_url.rstrip("/")
