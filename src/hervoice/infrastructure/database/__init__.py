"""
Database infrastructure components.
"""

from hervoice.infrastructure.database.connection import (
    Base,
    DatabaseManager,
    get_db_manager,
    get_async_session,
)

__all__ = [
    "Base",
    "DatabaseManager",
    "get_db_manager",
    "get_async_session",
]
