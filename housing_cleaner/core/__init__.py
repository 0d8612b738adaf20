"""Core module - Settings and error types."""
