"""Shared helpers: HTTP client, errors and logging utilities."""
