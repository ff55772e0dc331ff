"""
Base Repository Pattern

Provides generic async operations for all repositories.
Implements the Repository pattern for clean separation between
domain logic and data access.
"""

from typing import Generic, Optional, Type, TypeVar
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hervoice.infrastructure.database.connection import Base

# Type variable for model types
ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    """
    Generic base repository with async CRUD operations.

    Subclass and specify the model type for entity-specific repositories.

    Usage:
        class UserRepository(BaseRepository[UserModel]):
            pass

        repo = UserRepository(UserModel, session)
        user = await repo.get_by_id(user_id)
    """

    def __init__(self, model: Type[ModelT], session: AsyncSession) -> None:
        """
        Initialize repository with model class and session.

        Args:
            model: SQLAlchemy model class
            session: Async database session
        """
        self._model = model
        self._session = session

    async def get_by_id(self, id: UUID) -> Optional[ModelT]:
        """
        Get entity by primary key ID.

        Args:
            id: Entity UUID

        Returns:
            Entity if found, None otherwise
        """
        result = await self._session.execute(
            select(self._model).where(self._model.id == id)
        )
        return result.scalar_one_or_none()

    async def create(self, entity: ModelT) -> ModelT:
        """
        Create a new entity.

        Flushes immediately so constraint violations surface here.

        Args:
            entity: Entity instance to create

        Returns:
            Created entity with ID and server defaults loaded
        """
        self._session.add(entity)
        await self._session.flush()
        await self._session.refresh(entity)
        return entity
