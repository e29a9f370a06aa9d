# rateorant/__init__.py
"""Telegram client for the Rateorant restaurant rating service."""

__version__ = "0.1.0"
