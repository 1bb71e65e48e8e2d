"""CLI layer for defter application."""
