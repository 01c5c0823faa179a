"""Core pipeline logic for npmirror."""
