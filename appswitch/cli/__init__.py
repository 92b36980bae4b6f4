"""Command-line interface for appswitch."""
