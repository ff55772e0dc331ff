"""
Credential Store Interface

Abstract persistence contract the auth service depends on.

ARCHITECTURE: This interface allows swapping storage without changing
service layer code. The PostgreSQL implementation lives in
hervoice.infrastructure.database.repositories.user_repository.

Implementations must:
- Enforce email uniqueness in storage and raise DuplicateUserError
  when an insert violates it (concurrent signups race past the
  service-level existence check).
- Raise InternalError for any other storage failure.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from hervoice.domain.models import Credential


class CredentialStore(ABC):
    """Persistence of account credentials and reset requests."""

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[Credential]:
        """Get credential by exact email, or None."""
        pass

    @abstractmethod
    async def find_by_id(self, user_id: str) -> Optional[Credential]:
        """Get credential by user id, or None."""
        pass

    @abstractmethod
    async def insert(self, email: str, name: str, password_hash: str) -> Credential:
        """
        Persist a new credential.

        Returns:
            Stored credential with its assigned id

        Raises:
            DuplicateUserError: If the email is already taken
        """
        pass

    @abstractmethod
    async def create_password_reset(
        self,
        email: str,
        token_digest: str,
        expires_at: datetime,
    ) -> None:
        """Record a pending password reset by token digest."""
        pass
