"""Command-line interface for fastly-access."""
