"""CLI commands for defter."""
