"""Recall: a terminal spaced repetition trainer."""

__version__ = "1.0.0"
