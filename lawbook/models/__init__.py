# lawbook/models/__init__.py

from .user import User, UserRole
from .session import WebSession


__all__ = [
    "User",
    "UserRole",
    "WebSession",
]
