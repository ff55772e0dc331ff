"""
Repository pattern implementations package.
"""

from hervoice.infrastructure.database.repositories.base import BaseRepository
from hervoice.infrastructure.database.repositories.user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
]
