"""Shared handler utilities: observability, errors, responses and application context."""
