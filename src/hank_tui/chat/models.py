"""Data models for chat messages.

Hides the representation of transcript entries and of the remote store's
wire format. Server timestamps are integer milliseconds assigned by the
store; the client leaves ``timestamp`` unset for anything it has not seen
come back from the server.
"""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, Field, field_validator


class Role(str, Enum):
    """Who authored a message."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class MessageStatus(str, Enum):
    """Lifecycle of a transcript entry.

    ``PENDING`` user sends become ``CONFIRMED`` once the poll echoes them,
    or ``FAILED`` if the send request fails. ``LOCAL`` marks client-side
    notices that the server never sees.
    """

    PENDING = "pending"
    CONFIRMED = "confirmed"
    FAILED = "failed"
    LOCAL = "local"


def _coerce_role(value: Any) -> Any:
    if isinstance(value, str):
        value = value.lower()
        # Older servers report failures with their own role
        if value == "error":
            return Role.SYSTEM
    return value


class ChatMessage(BaseModel):
    """A single entry in the transcript."""

    role: Role
    text: str
    timestamp: int | None = Field(default=None, description="Server timestamp in ms")
    status: MessageStatus = MessageStatus.CONFIRMED
    local_id: int | None = Field(default=None, description="Client correlation id")
    is_error: bool = False
    received_at: datetime = Field(default_factory=datetime.now)

    @field_validator("role", mode="before")
    @classmethod
    def normalize_role(cls, value: Any) -> Any:
        return _coerce_role(value)

    @property
    def key(self) -> tuple[int | None, Role, str]:
        """Identity of a server message: timestamp, role and text."""
        return (self.timestamp, self.role, self.text)

    @property
    def is_pending(self) -> bool:
        return self.status == MessageStatus.PENDING


class ServerMessage(BaseModel):
    """A message as returned by ``GET /messages``."""

    role: Role
    text: str = Field(validation_alias=AliasChoices("content", "text"))
    timestamp: int = Field(ge=0)

    @field_validator("role", mode="before")
    @classmethod
    def normalize_role(cls, value: Any) -> Any:
        return _coerce_role(value)

    def to_chat_message(self) -> ChatMessage:
        return ChatMessage(
            role=self.role,
            text=self.text,
            timestamp=self.timestamp,
            status=MessageStatus.CONFIRMED,
        )


class ChatReply(BaseModel):
    """The response body of ``POST /chat``."""

    text: str = Field(validation_alias=AliasChoices("content", "text"))
    role: Role = Role.ASSISTANT
    timestamp: int | None = None
    complete: bool = True

    @field_validator("role", mode="before")
    @classmethod
    def normalize_role(cls, value: Any) -> Any:
        return _coerce_role(value)
