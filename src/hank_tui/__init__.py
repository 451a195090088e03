"""
hank-tui: a terminal chat client for the Hank chat server.

This package follows Parnas's information hiding principles,
where each module hides a specific design decision.
"""

__version__ = "0.1.0"

from .chat import ChatMessage, Role, SyncCoordinator, Transcript
from .config import Settings, resolve_settings
from .editor import HistoryNavigator, InputEditor
from .errors import HankError
from .session import ChatSession, Focus

__all__ = [
    "ChatMessage",
    "ChatSession",
    "Focus",
    "HankError",
    "HistoryNavigator",
    "InputEditor",
    "Role",
    "Settings",
    "SyncCoordinator",
    "Transcript",
    "resolve_settings",
]
