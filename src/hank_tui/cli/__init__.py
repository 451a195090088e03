"""Command-line interface for hank-tui."""
