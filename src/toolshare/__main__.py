"""Main entry point for ``python -m toolshare``."""

from toolshare.cli import app


if __name__ == "__main__":
    app()
