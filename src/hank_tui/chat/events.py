"""Completion events for background requests.

Requests run as asyncio tasks and never touch shared state. When one
finishes it puts one of these events on the coordinator's queue, and the
single consumer on the control loop applies it.
"""

from dataclasses import dataclass, field

from ..errors import RemoteStoreError
from .models import ChatReply, ServerMessage


@dataclass(frozen=True)
class FetchCompleted:
    epoch: int
    since: int
    messages: list[ServerMessage] = field(default_factory=list)


@dataclass(frozen=True)
class FetchFailed:
    epoch: int
    error: RemoteStoreError


@dataclass(frozen=True)
class SendCompleted:
    local_id: int
    reply: ChatReply


@dataclass(frozen=True)
class SendFailed:
    local_id: int
    error: RemoteStoreError


@dataclass(frozen=True)
class ClearCompleted:
    pass


@dataclass(frozen=True)
class ClearFailed:
    error: RemoteStoreError


SyncEvent = FetchCompleted | FetchFailed | SendCompleted | SendFailed | ClearCompleted | ClearFailed
