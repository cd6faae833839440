"""CLI commands for blogue."""

from . import post, schema

__all__ = ["post", "schema"]
