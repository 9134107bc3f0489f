"""Allow ``python -m doclock``."""

from doclock.cli.main import main

if __name__ == "__main__":
    main()
