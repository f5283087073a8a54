"""Configuration models for the handlers."""
