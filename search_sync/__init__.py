"""Synchronize publishable site content into a remote search index."""

__version__ = "0.1.0"
