"""UI configuration constants.

Centralizes magic numbers and configuration values for the UI module.
"""


class LogLevel:
    """Log level constants with numeric values for comparison.

    Same numbers as the standard ``logging`` module, so records can be
    compared against the panel threshold directly.
    Lower numeric value = more verbose (shows more messages).
    """

    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40

    _names = {
        DEBUG: "DEBUG",
        INFO: "INFO",
        WARNING: "WARNING",
        ERROR: "ERROR",
    }

    _from_string = {
        "debug": DEBUG,
        "info": INFO,
        "warning": WARNING,
        "error": ERROR,
    }

    @classmethod
    def name(cls, level: int) -> str:
        """Get the name for a log level."""
        return cls._names.get(level, "UNKNOWN")

    @classmethod
    def from_string(cls, level_str: str) -> int:
        """Convert string to log level. Returns DEBUG if invalid."""
        return cls._from_string.get(level_str.lower(), cls.DEBUG)

    @classmethod
    def nearest(cls, level: int) -> int:
        """Round a logging level (e.g. CRITICAL) onto this scale."""
        if level >= cls.ERROR:
            return cls.ERROR
        if level >= cls.WARNING:
            return cls.WARNING
        if level >= cls.INFO:
            return cls.INFO
        return cls.DEBUG


# Input box configuration
INPUT_VISIBLE_ROWS = 3  # Text rows inside the input border
CURSOR_STYLE = "reverse"

# Chat view configuration
MOUSE_SCROLL_LINES = 3  # Transcript lines per wheel step

# Log panel configuration
LOG_TIMESTAMP_FORMAT = "%H:%M:%S"
LOG_MAX_MESSAGE_LENGTH = 500  # Characters before truncating log messages

# Styles for transcript line kinds, keyed by LineStyle value
LINE_STYLES = {
    "user": "bold $primary",
    "assistant": "$foreground",
    "system": "italic $text-muted",
    "error": "bold $error",
    "pending": "$text-muted",
    "failed": "strike $error",
    "thinking": "italic $warning",
    "blank": "",
}
HEADER_STYLES = {
    "user": "bold $secondary",
    "assistant": "bold $success",
    "pending": "$text-muted",
    "failed": "$error",
}
