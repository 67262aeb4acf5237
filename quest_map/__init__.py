"""Procedural quest map generation with staged reveal."""

__version__ = "0.1.0"
