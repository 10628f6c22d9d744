"""Allow ``python -m taskdash``."""

from taskdash.cli import main

if __name__ == "__main__":
    main()
