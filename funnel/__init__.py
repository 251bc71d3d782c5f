"""Advertorial articles and quiz funnel runtime."""

__version__ = "0.1.0"
