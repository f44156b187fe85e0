# src/nedapay/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import stellar_auth_router, system_router, users_router

__all__ = [
    "stellar_auth_router",
    "system_router",
    "users_router",
]
