"""Allow ``python -m rystrelease``."""

from rystrelease.cli.app import main

if __name__ == "__main__":
    main()
