"""Entry point for ``python -m verse_layout``."""

from .cli import main

if __name__ == "__main__":
    main()
