"""Modal screens for the TUI.

This module hides the design decisions about:
- Help dialog appearance (CSS, layout)
- Which key bindings are listed and how
- How the dialog is dismissed

To change how help looks, modify only this file.
"""

from textual import events
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Static

HELP_SECTIONS: list[tuple[str, list[tuple[str, str]]]] = [
    ("Input", [
        ("Enter / Ctrl+S", "Send message"),
        ("Shift+Enter / Alt+Enter / Ctrl+J", "New line"),
        ("Ctrl+Up / Ctrl+Down", "Previous / next sent message"),
        ("Arrows, Home, End", "Move cursor"),
        ("Ctrl+V", "Paste from clipboard"),
    ]),
    ("Chat", [
        ("Tab", "Switch between input and chat"),
        ("Up / Down (chat focus)", "Scroll one line"),
        ("Home / End (chat focus)", "Scroll to top / bottom"),
        ("Alt+Up / Alt+Down", "Scroll one line from anywhere"),
        ("PageUp / PageDown", "Scroll one page"),
    ]),
    ("General", [
        ("Ctrl+L", "Clear chat (here and on the server)"),
        ("Ctrl+Shift+D", "Delete saved history"),
        ("Ctrl+D", "Toggle log panel"),
        ("F1 / ? (chat focus)", "Toggle this help"),
        ("Esc / Ctrl+C", "Quit"),
    ]),
]


def help_text() -> str:
    """Format the key binding table as plain text."""
    key_width = max(len(key) for _, rows in HELP_SECTIONS for key, _ in rows)
    lines = []
    for title, rows in HELP_SECTIONS:
        if lines:
            lines.append("")
        lines.append(title)
        lines.extend(f"  {key:<{key_width}}  {action}" for key, action in rows)
    return "\n".join(lines)


class HelpScreen(ModalScreen[None]):
    """Key binding overview; any key closes it."""

    CSS = """
    HelpScreen {
        align: center middle;
        background: $background 70%;
    }

    #help-dialog {
        width: auto;
        max-width: 90%;
        height: auto;
        max-height: 90%;
        border: tall $accent;
        background: $surface;
        padding: 1 2;
    }

    #help-title {
        width: 100%;
        text-align: center;
        text-style: bold;
        color: $accent;
        padding: 0 0 1 0;
        border-bottom: solid $border;
        margin-bottom: 1;
    }

    #help-body {
        width: auto;
        color: $foreground;
    }

    #help-hint {
        width: 100%;
        text-align: center;
        color: $text-muted;
        margin-top: 1;
    }
    """

    def compose(self) -> ComposeResult:
        with Vertical(id="help-dialog"):
            yield Static("Keyboard Shortcuts", id="help-title")
            yield Static(help_text(), id="help-body", markup=False)
            yield Static("Press any key to close", id="help-hint")

    def on_key(self, event: events.Key) -> None:
        event.stop()
        event.prevent_default()
        self.dismiss(None)
