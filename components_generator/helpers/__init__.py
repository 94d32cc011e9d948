"""Shared helpers: configuration, YAML loading and logging."""
