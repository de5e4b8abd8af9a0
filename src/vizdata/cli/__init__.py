"""Command-line interface for vizdata."""
