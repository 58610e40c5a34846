"""Database connection and management."""

from .connection import DatabaseManager

__all__ = [
    "DatabaseManager",
]
