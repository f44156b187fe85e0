# src/nedapay/models/__init__.py
"""SQLAlchemy models for the NEDApay backend."""

from .user import User

__all__ = ["User"]
