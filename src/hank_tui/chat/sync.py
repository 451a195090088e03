"""Sync coordinator.

Drives polling, sending and clearing against the remote store without
blocking the control loop:

- Each request runs as its own asyncio task and only reports back by
  putting a completion event on a queue.
- ``apply`` is the single place events mutate the transcript; call it
  from the control loop only (``run`` does that in a loop).
- At most one fetch is outstanding; a poll tick while one is pending is
  skipped rather than queued.
- A clear bumps the transcript epoch, so a fetch issued before the clear
  cannot repopulate the emptied transcript with stale data.
- No fetch is issued while a clear is waiting for the server, so a poll
  from zero cannot reload messages the server has not dropped yet.
"""

import asyncio
import logging
from collections.abc import Callable, Coroutine
from enum import Enum
from typing import Any

from ..config import DEFAULT_SEND_TIMEOUT
from ..errors import NetworkError, RemoteStoreError
from ..remote.base import RemoteStore
from .events import (
    ClearCompleted,
    ClearFailed,
    FetchCompleted,
    FetchFailed,
    SendCompleted,
    SendFailed,
    SyncEvent,
)
from .models import ChatMessage
from .transcript import Transcript

logger = logging.getLogger(__name__)


class ConnectionStatus(str, Enum):
    """Connection state shown in the status bar."""

    CONNECTED = "Connected"
    SENDING = "Sending..."
    ERROR = "Error"


class SyncCoordinator:
    """Keeps a transcript in step with a remote store."""

    def __init__(
        self,
        store: RemoteStore,
        transcript: Transcript,
        send_timeout: float = DEFAULT_SEND_TIMEOUT,
    ) -> None:
        self._store = store
        self._transcript = transcript
        self._send_timeout = send_timeout
        self._queue: asyncio.Queue[SyncEvent] = asyncio.Queue()
        self._tasks: set[asyncio.Task] = set()
        self._fetch_task: asyncio.Task | None = None
        self._fetch_outstanding = False
        self._sends_in_flight: set[int] = set()
        self._clears_pending = 0
        self.status = ConnectionStatus.CONNECTED
        self.last_error: str | None = None

    @property
    def store(self) -> RemoteStore:
        return self._store

    @property
    def transcript(self) -> Transcript:
        return self._transcript

    @property
    def fetch_in_flight(self) -> bool:
        """True from issuing a fetch until its result has been applied."""
        return self._fetch_outstanding

    @property
    def sending(self) -> bool:
        return bool(self._sends_in_flight)

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> asyncio.Task:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    # Requests (called from the control loop)

    def request_fetch(self) -> bool:
        """Start a poll for messages newer than the high-water-mark.

        Returns False if a fetch is already outstanding or a clear is pending.
        """
        if self._fetch_outstanding or self._clears_pending:
            return False
        self._fetch_outstanding = True
        self._fetch_task = self._spawn(
            self._fetch(self._transcript.epoch, self._transcript.high_water_mark)
        )
        return True

    def request_send(self, text: str) -> ChatMessage:
        """Show ``text`` as a pending user message and post it."""
        message = self._transcript.add_pending(text)
        self._sends_in_flight.add(message.local_id)
        self.status = ConnectionStatus.SENDING
        self.last_error = None
        self._spawn(self._send(message.local_id, text))
        return message

    def request_clear(self) -> None:
        """Empty the transcript now and ask the server to do the same."""
        if self._fetch_task is not None and not self._fetch_task.done():
            self._fetch_task.cancel()
        self._fetch_outstanding = False
        self._transcript.clear()
        self.last_error = None
        self._clears_pending += 1
        self._spawn(self._clear())

    # Background bodies

    async def _fetch(self, epoch: int, since: int) -> None:
        try:
            messages = await self._store.fetch_messages(since)
        except RemoteStoreError as e:
            await self._queue.put(FetchFailed(epoch, e))
            return
        except Exception as e:
            logger.exception("Unexpected error while polling")
            await self._queue.put(FetchFailed(epoch, NetworkError(f"Poll failed: {e}")))
            return
        await self._queue.put(FetchCompleted(epoch, since, messages))

    async def _send(self, local_id: int, text: str) -> None:
        try:
            reply = await asyncio.wait_for(
                self._store.send_message(text, timeout=self._send_timeout),
                timeout=self._send_timeout,
            )
        except asyncio.TimeoutError:
            error: RemoteStoreError = NetworkError(
                f"No reply within {self._send_timeout:g}s"
            )
        except RemoteStoreError as e:
            error = e
        except Exception as e:
            logger.exception("Unexpected error while sending")
            error = NetworkError(f"Send failed: {e}")
        else:
            await self._queue.put(SendCompleted(local_id, reply))
            return
        await self._queue.put(SendFailed(local_id, error))

    async def _clear(self) -> None:
        try:
            await self._store.clear_messages()
        except RemoteStoreError as e:
            await self._queue.put(ClearFailed(e))
            return
        except Exception as e:
            logger.exception("Unexpected error while clearing")
            await self._queue.put(ClearFailed(NetworkError(str(e))))
            return
        await self._queue.put(ClearCompleted())

    # Event application (control loop only)

    def apply(self, event: SyncEvent) -> bool:
        """Apply one completion event. Returns True if visible state changed."""
        if isinstance(event, FetchCompleted):
            return self._apply_fetch(event)
        if isinstance(event, FetchFailed):
            if event.epoch != self._transcript.epoch:
                return False
            self._fetch_outstanding = False
            logger.info("Poll failed: %s", event.error)
            self.status = ConnectionStatus.ERROR
            self.last_error = str(event.error)
            return True
        if isinstance(event, SendCompleted):
            self._sends_in_flight.discard(event.local_id)
            if not self._sends_in_flight:
                self.status = ConnectionStatus.CONNECTED
            logger.debug("Send %d acknowledged", event.local_id)
            # The echo and the reply arrive through the poll
            self.request_fetch()
            return True
        if isinstance(event, SendFailed):
            self._sends_in_flight.discard(event.local_id)
            self._transcript.mark_failed(event.local_id, str(event.error))
            self.status = ConnectionStatus.ERROR
            self.last_error = str(event.error)
            return True
        if isinstance(event, ClearCompleted):
            self._clears_pending = max(0, self._clears_pending - 1)
            logger.info("Server history cleared")
            return False
        if isinstance(event, ClearFailed):
            self._clears_pending = max(0, self._clears_pending - 1)
            logger.warning("Clearing server history failed: %s", event.error)
            self.status = ConnectionStatus.ERROR
            self.last_error = f"Clear failed: {event.error}"
            return True
        raise TypeError(f"Unknown sync event: {event!r}")

    def _apply_fetch(self, event: FetchCompleted) -> bool:
        if event.epoch != self._transcript.epoch:
            logger.debug("Dropping fetch issued before clear")
            return False
        self._fetch_outstanding = False
        changed = False
        if self.status == ConnectionStatus.ERROR and not self.sending:
            self.status = ConnectionStatus.CONNECTED
            self.last_error = None
            changed = True
        result = self._transcript.merge(event.messages)
        return changed or result.changed

    def drain(self) -> int:
        """Apply every queued event without waiting. Returns how many changed state."""
        changed = 0
        while not self._queue.empty():
            if self.apply(self._queue.get_nowait()):
                changed += 1
        return changed

    async def run(self, on_change: Callable[[SyncEvent], None]) -> None:
        """Consume events forever, calling ``on_change`` after visible changes."""
        while True:
            event = await self._queue.get()
            if self.apply(event):
                on_change(event)

    async def settle(self) -> int:
        """Wait for all outstanding requests and apply their events."""
        changed = 0
        while True:
            if self._tasks:
                await asyncio.gather(*list(self._tasks), return_exceptions=True)
            changed += self.drain()
            if not self._tasks and self._queue.empty():
                return changed

    async def aclose(self) -> None:
        """Cancel outstanding requests."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._fetch_outstanding = False
        self._clears_pending = 0
