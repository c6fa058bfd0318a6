"""Echolog — a local, place-aware personal journal."""

__version__ = "0.1.0"
