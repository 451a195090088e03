"""JSON file history backend.

Stores the transcript as pretty-printed JSON, by default in
``~/.config/hank-tui/history.json``.
"""

import logging
from pathlib import Path

from pydantic import ValidationError

from ..chat.models import ChatMessage
from ..config import TRANSCRIPT_SAVE_LIMIT, history_path
from ..errors import PersistenceError
from .base import HistoryStore
from .models import ChatHistory

logger = logging.getLogger(__name__)


class JsonHistoryStore(HistoryStore):
    """History saved to a single JSON file."""

    def __init__(
        self,
        path: str | Path | None = None,
        limit: int = TRANSCRIPT_SAVE_LIMIT,
    ) -> None:
        self._path = Path(path) if path is not None else history_path()
        self._limit = limit

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> ChatHistory | None:
        if not self._path.exists():
            return None
        try:
            content = self._path.read_text(encoding="utf-8")
            return ChatHistory.model_validate_json(content)
        except (OSError, UnicodeDecodeError, ValidationError) as e:
            raise PersistenceError(f"Cannot read history from {self._path}: {e}") from e

    def save(self, server_url: str, messages: list[ChatMessage]) -> ChatHistory:
        history = ChatHistory.snapshot(server_url, messages, self._limit)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            # Write then rename so an interrupted save never truncates the old file
            tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
            tmp_path.write_text(history.model_dump_json(indent=2), encoding="utf-8")
            tmp_path.replace(self._path)
        except OSError as e:
            raise PersistenceError(f"Cannot write history to {self._path}: {e}") from e
        logger.info("Saved %d message(s) to %s", len(history.messages), self._path)
        return history

    def delete(self) -> None:
        try:
            self._path.unlink(missing_ok=True)
        except OSError as e:
            raise PersistenceError(f"Cannot delete {self._path}: {e}") from e

    @property
    def backend_type(self) -> str:
        return "json"
