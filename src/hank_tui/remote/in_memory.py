"""In-process remote store.

Keeps the server-side history in a list and answers sends with a
configurable responder. Data is lost when the application exits.
Suitable for offline use and testing.
"""

import itertools
from collections.abc import Callable

from ..chat.models import ChatReply, Role, ServerMessage
from ..errors import RemoteStoreError
from .base import RemoteStore


def echo_responder(text: str) -> str:
    return f"Echo: {text}"


class InMemoryRemoteStore(RemoteStore):
    """Remote store that lives in the client process.

    Timestamps come from a strictly increasing counter, so they behave
    like the real server's millisecond clock without depending on it.
    Set ``fail_with`` to make every following request raise that error.
    """

    def __init__(
        self,
        responder: Callable[[str], str] = echo_responder,
        start_timestamp: int = 1,
        base_url: str = "memory://local",
    ) -> None:
        self._responder = responder
        self._clock = itertools.count(start_timestamp)
        self._base_url = base_url
        self._messages: list[ServerMessage] = []
        self.fail_with: RemoteStoreError | None = None
        self.closed = False

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def messages(self) -> list[ServerMessage]:
        return list(self._messages)

    def _check(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    def add(self, role: Role, text: str) -> ServerMessage:
        """Record a message as if another client had posted it."""
        message = ServerMessage(role=role, text=text, timestamp=next(self._clock))
        self._messages.append(message)
        return message

    async def fetch_messages(self, since: int) -> list[ServerMessage]:
        self._check()
        return [m for m in self._messages if m.timestamp > since]

    async def send_message(self, text: str, timeout: float | None = None) -> ChatReply:
        self._check()
        self.add(Role.USER, text)
        reply = self.add(Role.ASSISTANT, self._responder(text))
        return ChatReply(text=reply.text, role=reply.role, timestamp=reply.timestamp)

    async def clear_messages(self) -> None:
        self._check()
        self._messages.clear()

    async def close(self) -> None:
        self.closed = True
