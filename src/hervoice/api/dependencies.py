"""
FastAPI dependencies for the account endpoints.

Process-wide components (settings, hasher, codec, reset sender) live
on app.state and are built once in create_application(). The
credential store is built per request on its own database session.
"""

from datetime import timedelta
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from hervoice.infrastructure.database import get_async_session
from hervoice.infrastructure.database.repositories import UserRepository
from hervoice.services.auth import AuthService, CredentialStore


async def get_credential_store(
    session: AsyncSession = Depends(get_async_session),
) -> CredentialStore:
    """Credential store bound to the request's database session."""
    return UserRepository(session)


def get_auth_service(
    request: Request,
    store: CredentialStore = Depends(get_credential_store),
) -> AuthService:
    """Assemble the auth service for one request."""
    state = request.app.state
    return AuthService(
        store,
        state.password_hasher,
        state.token_codec,
        reset_ttl=timedelta(seconds=state.settings.auth.reset_token_ttl_seconds),
        reset_link_base=state.settings.app_base_url,
        reset_link_sender=state.reset_link_sender,
    )


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """
    Pull the token out of an Authorization header.

    Returns None when the header is absent, uses another scheme
    or has no credentials part.
    """
    if not authorization:
        return None
    scheme, _, credentials = authorization.strip().partition(" ")
    if scheme.lower() != "bearer":
        return None
    return credentials.strip() or None
