"""Command-line interface for procwarden."""
