"""
Database ORM models package.
"""

from hervoice.infrastructure.database.models.user_model import UserModel
from hervoice.infrastructure.database.models.password_reset_model import PasswordResetModel

__all__ = [
    "UserModel",
    "PasswordResetModel",
]
