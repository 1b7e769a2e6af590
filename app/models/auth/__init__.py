# app/models/auth/__init__.py

from .user import User

__all__ = [
    "User",
]
