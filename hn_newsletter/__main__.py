"""Allow ``python -m hn_newsletter``."""

from hn_newsletter.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
