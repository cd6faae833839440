"""CLI tools for blogue."""
