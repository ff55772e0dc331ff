"""
User Database Model

SQLAlchemy ORM model for account credential persistence.

SECURITY: password_hash is a salted PBKDF2 hash and never leaves
the auth layer. Email uniqueness is enforced by a unique index.
"""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import DateTime, String, func
from sqlalchemy.dialects.postgresql import UUID as PGUUID
from sqlalchemy.orm import Mapped, mapped_column

from hervoice.domain.models import Credential
from hervoice.infrastructure.database.connection import Base


class UserModel(Base):
    """
    User table ORM model.

    Table: users
    """

    __tablename__ = "users"

    id: Mapped[UUID] = mapped_column(
        PGUUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
        doc="Unique user identifier"
    )
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        doc="Normalized email address"
    )
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        doc="Display name"
    )
    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        doc="PBKDF2 password hash"
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        doc="Account creation timestamp"
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
        doc="Last update timestamp"
    )

    def __repr__(self) -> str:
        return f"<UserModel(id={self.id}, email='{self.email[:3]}***')>"

    def to_credential(self) -> Credential:
        """Convert to the domain credential."""
        return Credential(
            id=str(self.id),
            email=self.email,
            name=self.name,
            password_hash=self.password_hash,
            created_at=self.created_at,
        )
