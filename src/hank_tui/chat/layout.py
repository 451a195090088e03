"""Transcript layout.

Turns transcript messages into wrapped display lines for the chat view.
Each line carries a style key; how a style looks is the renderer's
business. The number of lines produced here is what the scroll
controller clamps against.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from ..editor.width import text_width
from ..editor.wrap import wrap_text
from .models import ChatMessage, MessageStatus, Role

CLOCK_FORMAT = "%H:%M:%S"
UNKNOWN_CLOCK = "??:??:??"
USER_LABEL = "You"
ERROR_LABEL = "Error"
WARNING_MARK = "⚠"


class LineStyle(str, Enum):
    """Style keys attached to transcript display lines."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"
    ERROR = "error"
    PENDING = "pending"
    FAILED = "failed"
    THINKING = "thinking"
    BLANK = "blank"


@dataclass(frozen=True)
class TranscriptLine:
    """One display row of the transcript.

    ``header_width`` is the number of leading columns holding the clock
    and author label, so a renderer can style them apart from the body.
    """

    text: str
    style: LineStyle
    header_width: int = 0


def format_clock(message: ChatMessage) -> str:
    """Return the HH:MM:SS shown next to a message."""
    if message.timestamp is None:
        return message.received_at.strftime(CLOCK_FORMAT)
    try:
        return datetime.fromtimestamp(message.timestamp / 1000).strftime(CLOCK_FORMAT)
    except (OverflowError, OSError, ValueError):
        return UNKNOWN_CLOCK


def _style_for(message: ChatMessage) -> LineStyle:
    if message.is_error:
        return LineStyle.ERROR
    if message.status == MessageStatus.PENDING:
        return LineStyle.PENDING
    if message.status == MessageStatus.FAILED:
        return LineStyle.FAILED
    if message.role == Role.USER:
        return LineStyle.USER
    if message.role == Role.ASSISTANT:
        return LineStyle.ASSISTANT
    return LineStyle.SYSTEM


def _header(message: ChatMessage, assistant_name: str) -> str:
    if message.is_error:
        return f"{ERROR_LABEL}: "
    if message.role == Role.SYSTEM:
        return ""
    label = USER_LABEL if message.role == Role.USER else assistant_name
    return f"{format_clock(message)} {label}: "


def _wrapped(text: str, style: LineStyle, width: int, header_width: int = 0) -> list[TranscriptLine]:
    rows = wrap_text(text, width)
    result = []
    for index, row in enumerate(rows):
        header = min(header_width, row.width) if index == 0 else 0
        result.append(TranscriptLine(row.text, style, header))
    return result


def layout_message(message: ChatMessage, width: int, assistant_name: str = "Hank") -> list[TranscriptLine]:
    """Lay out one message followed by a blank separator line."""
    style = _style_for(message)
    header = _header(message, assistant_name)
    indent = " " * text_width(header) if header and not message.is_error else ""

    body = message.text.split("\n")
    lines = _wrapped(header + body[0], style, width, text_width(header))
    for extra in body[1:]:
        lines.extend(_wrapped(indent + extra, style, width))
    lines.append(TranscriptLine("", LineStyle.BLANK))
    return lines


def render_transcript(
    messages: Iterable[ChatMessage],
    width: int,
    assistant_name: str = "Hank",
    thinking: bool = False,
    last_error: str | None = None,
) -> list[TranscriptLine]:
    """Lay out the whole transcript for a viewport ``width`` columns wide."""
    width = max(width, 1)
    lines: list[TranscriptLine] = []
    for message in messages:
        lines.extend(layout_message(message, width, assistant_name))
    if thinking:
        lines.extend(_wrapped(f"{assistant_name} is thinking...", LineStyle.THINKING, width))
    if last_error:
        lines.extend(_wrapped(f"{WARNING_MARK} {last_error}", LineStyle.ERROR, width))
    return lines
