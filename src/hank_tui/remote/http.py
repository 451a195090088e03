"""HTTP remote store backed by httpx.

Endpoints:
- ``GET /messages?since=<ms>`` -> list of ``{role, content, timestamp}``
- ``POST /chat`` with ``{"message": ...}`` -> ``{content, complete}``
- ``POST /messages/clear``
"""

import json
import logging

import httpx
from pydantic import TypeAdapter, ValidationError

from ..chat.models import ChatReply, ServerMessage
from ..config import DEFAULT_FETCH_TIMEOUT, DEFAULT_SEND_TIMEOUT
from ..errors import MalformedResponse, NetworkError, ServerError
from .base import RemoteStore

logger = logging.getLogger(__name__)

_MESSAGE_LIST = TypeAdapter(list[ServerMessage])


class HttpRemoteStore(RemoteStore):
    """Remote store speaking the chat server's JSON-over-HTTP protocol.

    Example:
        async with HttpRemoteStore("http://localhost:8080") as store:
            messages = await store.fetch_messages(since=0)
    """

    def __init__(
        self,
        base_url: str,
        fetch_timeout: float = DEFAULT_FETCH_TIMEOUT,
        send_timeout: float = DEFAULT_SEND_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._fetch_timeout = fetch_timeout
        self._send_timeout = send_timeout
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=fetch_timeout,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    async def _request(
        self,
        method: str,
        path: str,
        timeout: float,
        **kwargs,
    ) -> httpx.Response:
        try:
            response = await self._client.request(method, path, timeout=timeout, **kwargs)
            response.raise_for_status()
        except httpx.TimeoutException as e:
            raise NetworkError(f"Request to {path} timed out after {timeout:g}s") from e
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise ServerError(f"Server returned {status} for {path}", status_code=status) from e
        except httpx.TransportError as e:
            raise NetworkError(f"Connection error: {e}") from e
        except httpx.DecodingError as e:
            raise MalformedResponse(f"Cannot decode response from {path}: {e}") from e
        except httpx.HTTPError as e:
            raise NetworkError(f"Request to {path} failed: {e}") from e
        return response

    @staticmethod
    def _decode(response: httpx.Response):
        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise MalformedResponse(
                f"Failed to parse response: {e}", status_code=response.status_code
            ) from e

    async def fetch_messages(self, since: int) -> list[ServerMessage]:
        response = await self._request(
            "GET", "/messages", self._fetch_timeout, params={"since": since}
        )
        try:
            messages = _MESSAGE_LIST.validate_python(self._decode(response))
        except ValidationError as e:
            raise MalformedResponse(f"Unexpected message list: {e}") from e
        logger.debug("Fetched %d message(s) since %d", len(messages), since)
        return messages

    async def send_message(self, text: str, timeout: float | None = None) -> ChatReply:
        response = await self._request(
            "POST",
            "/chat",
            timeout if timeout is not None else self._send_timeout,
            json={"message": text},
        )
        try:
            return ChatReply.model_validate(self._decode(response))
        except ValidationError as e:
            raise MalformedResponse(f"Unexpected chat reply: {e}") from e

    async def clear_messages(self) -> None:
        await self._request("POST", "/messages/clear", self._fetch_timeout)

    async def close(self) -> None:
        await self._client.aclose()
