"""Core containers, configuration and execution helpers."""
