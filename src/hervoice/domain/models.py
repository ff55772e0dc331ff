"""
Account Domain Models

Plain dataclasses passed between the auth service, the credential
store and the API layer.

SECURITY: Credential carries the password hash and must never be
serialized to a client. Use PublicUser for anything outward-facing.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class PublicUser:
    """
    Client-visible view of an account.

    Attributes:
        id: Opaque stable user identifier
        email: Normalized email address
        name: Display name chosen at signup
    """

    id: str
    email: str
    name: str

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return {"id": self.id, "email": self.email, "name": self.name}


@dataclass(frozen=True)
class Credential:
    """
    Stored account credential.

    Attributes:
        id: Opaque stable user identifier
        email: Unique email address (comparison key)
        name: Display name
        password_hash: Salted PBKDF2 hash, never logged or returned
        created_at: Creation timestamp when known
    """

    id: str
    email: str
    name: str
    password_hash: str
    created_at: Optional[datetime] = None

    def to_public(self) -> PublicUser:
        """Strip the password hash."""
        return PublicUser(id=self.id, email=self.email, name=self.name)

    def __repr__(self) -> str:
        return f"Credential(id={self.id!r}, email='{self.email[:3]}***')"


@dataclass(frozen=True)
class AuthResult:
    """Outcome of a successful signup or login."""

    token: str
    user: PublicUser


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a successful token validation."""

    user: PublicUser
    valid: bool = True
