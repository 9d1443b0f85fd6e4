"""App constants and utilities."""
