"""
Password Reset Database Model

Pending password reset requests. Only the SHA-256 digest of the
reset token is stored, never the token itself.
"""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import DateTime, String, func
from sqlalchemy.dialects.postgresql import UUID as PGUUID
from sqlalchemy.orm import Mapped, mapped_column

from hervoice.infrastructure.database.connection import Base


class PasswordResetModel(Base):
    """
    Password reset table ORM model.

    Table: password_resets
    """

    __tablename__ = "password_resets"

    id: Mapped[UUID] = mapped_column(
        PGUUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )
    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
    )
    token_digest: Mapped[str] = mapped_column(
        String(64),
        unique=True,
        nullable=False,
        doc="Hex SHA-256 of the reset token"
    )
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<PasswordResetModel(id={self.id}, expires_at={self.expires_at})>"
