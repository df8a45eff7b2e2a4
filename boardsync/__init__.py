"""Optimistic task placement sync for board and backlog views."""

__version__ = "0.1.0"
