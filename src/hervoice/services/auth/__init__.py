"""
Authentication services package.

Credential hashing, session tokens and the account flows built on them.
"""

from hervoice.services.auth.auth_service import AuthService, normalize_email
from hervoice.services.auth.credential_store import CredentialStore
from hervoice.services.auth.password_hasher import PasswordHasher
from hervoice.services.auth.reset_delivery import LoggingResetLinkSender, ResetLinkSender
from hervoice.services.auth.token_codec import TokenCodec

__all__ = [
    "AuthService",
    "CredentialStore",
    "LoggingResetLinkSender",
    "PasswordHasher",
    "ResetLinkSender",
    "TokenCodec",
    "normalize_email",
]
