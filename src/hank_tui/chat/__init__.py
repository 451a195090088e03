"""Chat transcript and synchronisation for hank-tui.

Module structure (each module hides a design decision):
- models.py: message representation and wire format
- transcript.py: merge and dedup rules for the message list
- scroll.py: scroll offset and auto-follow over the wrapped transcript
- layout.py: how messages become display lines
- events.py: completion events produced by background requests
- sync.py: polling, sending and clearing against the remote store
"""

from .layout import LineStyle, TranscriptLine, render_transcript
from .models import ChatMessage, ChatReply, MessageStatus, Role, ServerMessage
from .scroll import ScrollController
from .sync import ConnectionStatus, SyncCoordinator
from .transcript import MergeResult, Transcript

__all__ = [
    "ChatMessage",
    "ChatReply",
    "ConnectionStatus",
    "LineStyle",
    "MergeResult",
    "MessageStatus",
    "Role",
    "ScrollController",
    "ServerMessage",
    "SyncCoordinator",
    "Transcript",
    "TranscriptLine",
    "render_transcript",
]
