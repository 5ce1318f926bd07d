"""Command-line interface for cradle."""
