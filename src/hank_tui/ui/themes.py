"""Theme definitions for the TUI.

This module hides the design decisions about:
- Color palettes and visual appearance
- Theme variables (borders, footer, text variants)

To add a new theme, define it here and register in the app.
"""

from textual.theme import Theme

# Catppuccin Mocha, trimmed to the variables this app's widgets use
HANK_MOCHA = Theme(
    name="hank-mocha",
    primary="#89b4fa",      # Blue - user messages, focused borders
    secondary="#cba6f7",    # Mauve - message headers
    accent="#f9e2af",       # Yellow - status bar highlights
    foreground="#cdd6f4",
    background="#11111b",
    success="#a6e3a1",      # Green - assistant name, connected
    warning="#fab387",      # Peach - thinking, sending
    error="#f38ba8",        # Red - failed sends and error lines
    surface="#1e1e2e",
    panel="#181825",
    dark=True,
    variables={
        "border": "#45475a",
        "border-blurred": "#313244",

        "footer-foreground": "#bac2de",
        "footer-background": "#11111b",
        "footer-key-foreground": "#f9e2af",
        "footer-key-background": "#313244",
        "footer-description-foreground": "#a6adc8",

        "text-muted": "#6c7086",
        "text-disabled": "#45475a",

        "scrollbar": "#313244",
        "scrollbar-background": "#181825",
    },
)
