"""Worker thread pools, the thread-safe task queues they run on, and a small demo."""

__version__ = "0.1.0"

__all__ = ["pools", "queues", "demo"]