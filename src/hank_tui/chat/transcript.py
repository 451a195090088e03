"""Chat transcript store.

Hides how sent and received messages are merged into one ordered list:

- Server-confirmed messages appear in timestamp order.
- A local send is shown immediately as ``PENDING`` and turned into the
  confirmed server copy when the poll echoes it back (matched on role and
  text, oldest pending first), so it never appears twice.
- Merging the same batch again, or an older batch, changes nothing.
- The high-water-mark only moves forward, except on an explicit clear.
"""

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from .models import ChatMessage, MessageStatus, Role, ServerMessage

logger = logging.getLogger(__name__)


@dataclass
class MergeResult:
    """What a merge changed."""

    added: int = 0
    confirmed: int = 0
    skipped: int = 0

    @property
    def changed(self) -> bool:
        return bool(self.added or self.confirmed)


class Transcript:
    """Ordered, append-only list of chat messages."""

    def __init__(self, messages: Iterable[ChatMessage] | None = None) -> None:
        self._messages: list[ChatMessage] = []
        self._known: set[tuple[int | None, Role, str]] = set()
        self._high_water_mark = 0
        self._next_local_id = 1
        # Bumped on clear so results of requests issued before it can be told apart
        self.epoch = 0
        # Bumped on every change, lets views skip redundant re-layout
        self.version = 0
        if messages:
            self.restore(messages)

    @property
    def high_water_mark(self) -> int:
        """Greatest server timestamp seen since the last clear (0 if none)."""
        return self._high_water_mark

    @property
    def messages(self) -> tuple[ChatMessage, ...]:
        return tuple(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[ChatMessage]:
        return iter(list(self._messages))

    def pending(self) -> list[ChatMessage]:
        return [m for m in self._messages if m.is_pending]

    def find(self, local_id: int) -> ChatMessage | None:
        for message in self._messages:
            if message.local_id == local_id:
                return message
        return None

    # Local entries

    def _allocate_id(self) -> int:
        local_id = self._next_local_id
        self._next_local_id += 1
        return local_id

    def add_pending(self, text: str) -> ChatMessage:
        """Append a user message that has been sent but not echoed yet."""
        message = ChatMessage(
            role=Role.USER,
            text=text,
            status=MessageStatus.PENDING,
            local_id=self._allocate_id(),
        )
        self._append(message)
        return message

    def add_notice(self, text: str, is_error: bool = False) -> ChatMessage:
        """Append a client-side System message that the server never sees."""
        message = ChatMessage(
            role=Role.SYSTEM,
            text=text,
            status=MessageStatus.LOCAL,
            local_id=self._allocate_id(),
            is_error=is_error,
        )
        self._append(message)
        return message

    def mark_failed(self, local_id: int, error: str) -> ChatMessage | None:
        """Mark a pending send as failed and append a System error entry.

        Returns the error entry, or None if the send is unknown or no
        longer pending (a late failure after the echo arrived).
        """
        message = self.find(local_id)
        if message is None or not message.is_pending:
            return None
        message.status = MessageStatus.FAILED
        logger.warning("Send %d failed: %s", local_id, error)
        return self.add_notice(error, is_error=True)

    def _append(self, message: ChatMessage) -> None:
        self._messages.append(message)
        self.version += 1

    # Server entries

    def merge(self, batch: Iterable[ServerMessage]) -> MergeResult:
        """Merge a fetched batch into the transcript.

        Idempotent: messages already known by (timestamp, role, text) are
        skipped. An echo of a pending local send confirms that send rather
        than adding a second copy.
        """
        result = MergeResult()
        for incoming in sorted(batch, key=lambda m: m.timestamp):
            message = incoming.to_chat_message()
            if message.key in self._known:
                result.skipped += 1
                continue
            self._known.add(message.key)
            self._high_water_mark = max(self._high_water_mark, message.timestamp or 0)

            pending = self._matching_pending(message)
            if pending is not None:
                self._messages.remove(pending)
                message.local_id = pending.local_id
                message.received_at = pending.received_at
                result.confirmed += 1
            else:
                result.added += 1
            self._insert_ordered(message)
        if result.changed:
            self.version += 1
        return result

    def _matching_pending(self, message: ChatMessage) -> ChatMessage | None:
        if message.role != Role.USER:
            return None
        for candidate in self._messages:
            if candidate.is_pending and candidate.text == message.text:
                return candidate
        return None

    def _insert_ordered(self, message: ChatMessage) -> None:
        """Insert after the last confirmed message not newer than this one.

        Batches normally arrive newer than everything confirmed, which makes
        this an append; local entries keep their place.
        """
        position = len(self._messages)
        for index in range(len(self._messages) - 1, -1, -1):
            existing = self._messages[index]
            if existing.timestamp is None:
                continue
            if existing.timestamp <= (message.timestamp or 0):
                break
            position = index
        self._messages.insert(position, message)

    # Whole-transcript operations

    def clear(self) -> None:
        """Empty the transcript and forget the high-water-mark.

        The next poll starts from zero and repopulates from whatever the
        server still holds.
        """
        self._messages.clear()
        self._known.clear()
        self._high_water_mark = 0
        self.epoch += 1
        self.version += 1

    def restore(self, messages: Iterable[ChatMessage]) -> None:
        """Load previously persisted messages, e.g. at start-up."""
        for message in messages:
            if message.is_pending:
                continue
            message.local_id = self._allocate_id()
            if message.timestamp is not None and message.status == MessageStatus.CONFIRMED:
                if message.key in self._known:
                    continue
                self._known.add(message.key)
                self._high_water_mark = max(self._high_water_mark, message.timestamp)
            self._messages.append(message)
        self.version += 1

    def tail(self, limit: int) -> list[ChatMessage]:
        """Return the newest ``limit`` messages, skipping unconfirmed sends."""
        kept = [m for m in self._messages if not m.is_pending]
        return kept[-limit:] if limit > 0 else []
