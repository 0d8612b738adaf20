"""Monitoring module - Logging setup and run events."""
