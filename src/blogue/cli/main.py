"""Main CLI entry point for blogue."""  # pragma: no cover

from blogue.cli.app import app  # pragma: no cover

# Register commands
from blogue.cli.commands import post, schema  # noqa: F401  # pragma: no cover

if __name__ == "__main__":  # pragma: no cover
    app()
