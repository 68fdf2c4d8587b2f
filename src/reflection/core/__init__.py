"""Shared infrastructure: configuration, errors, events, logging."""
