"""Package entry point for python -m execution."""

from fsguard.cli import app

if __name__ == "__main__":
    app()
