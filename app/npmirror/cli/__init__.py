"""Command-line interface for npmirror."""
