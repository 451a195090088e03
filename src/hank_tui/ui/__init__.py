"""Terminal UI module for hank-tui.

Provides the Textual application around a ``ChatSession``.

Module structure (Parnas principle - each module hides a design decision):
- config.py: UI constants and log levels
- formatting.py: Rich text for transcript lines and the input box
- widgets.py: Custom widgets (chat view, input box, status bar, log panel)
- styles.py: CSS styling (layout decisions)
- themes.py: Color palettes and theme configuration
- screens.py: Modal dialogs (help screen)
- app.py: Application orchestration (key forwarding, polling, repainting)
"""

from .app import HankApp, run_tui
from .config import LogLevel
from .widgets import ChatView, DebugPanel, DebugPanelHandler, InputView, StatusBar

__all__ = [
    "ChatView",
    "DebugPanel",
    "DebugPanelHandler",
    "HankApp",
    "InputView",
    "LogLevel",
    "StatusBar",
    "run_tui",
]
