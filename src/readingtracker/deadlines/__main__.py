"""Allow running as ``python -m readingtracker.deadlines``."""

from .cli import main

if __name__ == "__main__":
    main()
