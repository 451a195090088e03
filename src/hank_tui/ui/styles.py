"""CSS styles for the TUI.

Hides layout and styling decisions from the application logic.
Uses Textual CSS features: nesting, classes, variables.

Layout, top to bottom: header, transcript, input box, status bar,
optional log panel, footer. The input box height is fixed by
``INPUT_VISIBLE_ROWS`` plus its border.
"""

from .config import INPUT_VISIBLE_ROWS

APP_CSS = """
/* ============================================
   Main Screen Layout - single column
   ============================================ */
Screen {
    layout: vertical;
    background: $background;
}

/* ============================================
   Chat Transcript
   ============================================ */
#chat-view {
    height: 1fr;
    background: $panel;
    border: round $border;
    border-title-color: $primary;
    border-title-style: bold;
    border-title-align: left;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;

    &.-active {
        border: round $primary;
    }
}

/* ============================================
   Input Box
   ============================================ */
#input-view {
    height: %(input_height)d;
    background: $surface;
    border: round $border;
    border-title-color: $secondary;
    border-title-style: bold;
    border-title-align: left;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;

    &.-active {
        border: round $secondary;
    }

    &.-sending {
        color: $text-muted;
    }
}

/* ============================================
   Status Bar
   ============================================ */
#status-bar {
    height: 1;
    background: $boost;
    color: $foreground;
    padding: 0 1;

    &.-sending {
        color: $warning;
    }

    &.-error {
        color: $error;
        text-style: bold;
    }
}

/* ============================================
   Log Panel
   ============================================ */
#debug-panel {
    height: 10;
    background: $panel;
    border: round $border;
    border-title-color: $text-muted;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
}
""" % {"input_height": INPUT_VISIBLE_ROWS + 2}
