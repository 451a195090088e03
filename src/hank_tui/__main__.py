"""Allow ``python -m hank_tui``."""

from .cli.app import main

if __name__ == "__main__":
    main()
