"""Transcript persistence for hank-tui.

Keeps the most recent conversation between runs.
"""

from .base import HistoryStore
from .factory import create_history_store
from .models import ChatHistory

__all__ = [
    "ChatHistory",
    "HistoryStore",
    "create_history_store",
]
