"""Mentor/mentee matching, request lifecycle and per-match chat."""

__version__ = "1.0.0"
