"""Treasure hunts on disk: binary records, a manager and its command line, scores, a signal-driven monitor and an interactive hub."""

__version__ = "0.1.0"