"""
User Repository

PostgreSQL implementation of the credential store.
"""

from contextlib import contextmanager
from datetime import datetime
from typing import Iterator, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from hervoice.config.logging_config import get_logger
from hervoice.domain.errors import DuplicateUserError, InternalError
from hervoice.domain.models import Credential
from hervoice.infrastructure.database.models.password_reset_model import PasswordResetModel
from hervoice.infrastructure.database.models.user_model import UserModel
from hervoice.infrastructure.database.repositories.base import BaseRepository
from hervoice.services.auth.credential_store import CredentialStore

logger = get_logger(__name__)


@contextmanager
def _store_errors(operation: str) -> Iterator[None]:
    """Translate driver failures into InternalError."""
    try:
        yield
    except SQLAlchemyError as e:
        logger.error(
            "Credential store failure",
            operation=operation,
            error_type=type(e).__name__,
        )
        raise InternalError() from e


class UserRepository(BaseRepository[UserModel], CredentialStore):
    """
    Repository for account credentials.

    The unique index on users.email is the backstop for concurrent
    signups with the same address.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize with user model."""
        super().__init__(UserModel, session)

    async def find_by_email(self, email: str) -> Optional[Credential]:
        """
        Get credential by email address.

        Args:
            email: Normalized email

        Returns:
            Credential if found, None otherwise
        """
        with _store_errors("find_by_email"):
            result = await self._session.execute(
                select(UserModel).where(UserModel.email == email)
            )
            user = result.scalar_one_or_none()
        return user.to_credential() if user else None

    async def find_by_id(self, user_id: str) -> Optional[Credential]:
        """
        Get credential by user id.

        Ids that are not UUIDs cannot exist and resolve to None.
        """
        try:
            uuid = UUID(user_id)
        except ValueError:
            return None

        with _store_errors("find_by_id"):
            user = await self.get_by_id(uuid)
        return user.to_credential() if user else None

    async def insert(self, email: str, name: str, password_hash: str) -> Credential:
        """
        Persist and commit a new credential.

        Committed here so the row is durable before a token is issued.

        Raises:
            DuplicateUserError: If the email unique index rejects the row
            InternalError: If the flush or commit fails
        """
        user = UserModel(email=email, name=name, password_hash=password_hash)
        with _store_errors("insert"):
            try:
                user = await self.create(user)
                await self._session.commit()
            except IntegrityError as e:
                logger.info("Signup rejected by email unique index")
                raise DuplicateUserError() from e
        return user.to_credential()

    async def create_password_reset(
        self,
        email: str,
        token_digest: str,
        expires_at: datetime,
    ) -> None:
        """Record and commit a pending password reset."""
        with _store_errors("create_password_reset"):
            self._session.add(
                PasswordResetModel(
                    email=email,
                    token_digest=token_digest,
                    expires_at=expires_at,
                )
            )
            await self._session.commit()
