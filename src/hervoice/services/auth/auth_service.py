"""
Auth Service

Orchestrates the account flows:

    signup   -> hash password, persist credential, issue token
    login    -> fetch credential, verify password, issue token
    validate -> verify token, resolve the current account
    request_password_reset -> issue a one-time reset link

Every call is independent and stateless. Nothing is retried here:
store failures surface as InternalError and the caller owns retry
policy.

SECURITY: Login failures are indistinguishable between unknown
email and wrong password.
"""

import hashlib
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from hervoice.config.logging_config import get_logger
from hervoice.domain.errors import (
    DuplicateUserError,
    InvalidCredentialsError,
    InvalidTokenError,
    MissingTokenError,
    UserNotFoundError,
    ValidationError,
)
from hervoice.domain.models import AuthResult, Credential, ValidationResult
from hervoice.infrastructure.metrics import track_auth_operation
from hervoice.services.auth.credential_store import CredentialStore
from hervoice.services.auth.password_hasher import PasswordHasher
from hervoice.services.auth.reset_delivery import LoggingResetLinkSender, ResetLinkSender, mask_email
from hervoice.services.auth.token_codec import TokenCodec

logger = get_logger(__name__)

MAX_FIELD_LENGTH = 255
RESET_TOKEN_BYTES = 32
DEFAULT_RESET_TTL = timedelta(hours=1)


def normalize_email(email: Any) -> str:
    """
    Trim and lower-case an email; non-strings normalize to empty.

    Email is the account key and must match regardless of how the
    client cased it, so responses echo the normalized form rather
    than the submitted text.
    """
    if not isinstance(email, str):
        return ""
    return email.strip().lower()


def _is_encodable(value: str) -> bool:
    """False for text holding unpaired surrogates, which cannot be stored or echoed."""
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def _is_valid_email(email: str) -> bool:
    """Basic email format validation."""
    if not _is_encodable(email):
        return False
    local, _, domain = email.partition("@")
    return bool(local) and "." in domain and not domain.startswith(".") and not domain.endswith(".")


class AuthService:
    """
    Account signup, login and token validation.

    Usage:
        service = AuthService(store, hasher, codec)
        result = await service.signup("a@x.com", "pw123", "Jane")
        principal = await service.validate(result.token)
    """

    def __init__(
        self,
        store: CredentialStore,
        hasher: PasswordHasher,
        codec: TokenCodec,
        *,
        reset_ttl: timedelta = DEFAULT_RESET_TTL,
        reset_link_base: str = "http://localhost:3000",
        reset_link_sender: Optional[ResetLinkSender] = None,
    ) -> None:
        self._store = store
        self._hasher = hasher
        self._codec = codec
        self._reset_ttl = reset_ttl
        self._reset_link_base = reset_link_base.rstrip("/")
        self._reset_link_sender = reset_link_sender or LoggingResetLinkSender()

    @track_auth_operation("signup")
    async def signup(self, email: Any, password: Any, name: Any) -> AuthResult:
        """
        Register a new account.

        Raises:
            ValidationError: Missing or malformed field
            DuplicateUserError: Email already registered
        """
        email = normalize_email(email)
        name = name.strip() if isinstance(name, str) else ""
        if not email or not isinstance(password, str) or not password or not name:
            raise ValidationError("Email, password, and name are required.")
        if not _is_valid_email(email) or len(email) > MAX_FIELD_LENGTH:
            raise ValidationError("Email address is not valid.")
        if len(name) > MAX_FIELD_LENGTH:
            raise ValidationError("Name is too long.")
        if not _is_encodable(name):
            raise ValidationError("Name is not valid.")

        if await self._store.find_by_email(email) is not None:
            raise DuplicateUserError()

        password_hash = await self._hasher.hash_async(password)
        # Raises DuplicateUserError when a concurrent signup won the race
        credential = await self._store.insert(email, name, password_hash)

        logger.info("User registered", user_id=credential.id)
        return AuthResult(token=self._issue_token(credential), user=credential.to_public())

    @track_auth_operation("login")
    async def login(self, email: Any, password: Any) -> AuthResult:
        """
        Authenticate with email and password.

        Raises:
            ValidationError: Missing field
            InvalidCredentialsError: Unknown email or wrong password
        """
        email = normalize_email(email)
        if not email or not isinstance(password, str) or not password:
            raise ValidationError("Email and password are required.")
        if not _is_encodable(email):
            raise ValidationError("Email address is not valid.")

        credential = await self._store.find_by_email(email)
        if credential is None:
            await self._hasher.verify_async(password, self._hasher.placeholder())
            logger.info("Login failed")
            raise InvalidCredentialsError()

        if not await self._hasher.verify_async(password, credential.password_hash):
            logger.info("Login failed", user_id=credential.id)
            raise InvalidCredentialsError()

        logger.info("Login succeeded", user_id=credential.id)
        return AuthResult(token=self._issue_token(credential), user=credential.to_public())

    @track_auth_operation("validate")
    async def validate(self, bearer_token: Optional[str]) -> ValidationResult:
        """
        Resolve the account behind a bearer token.

        Raises:
            MissingTokenError: No token supplied
            InvalidTokenError: Malformed, forged or expired token
            UserNotFoundError: Account deleted after issuance
        """
        if not bearer_token:
            raise MissingTokenError()

        claims = self._codec.verify(bearer_token)
        if claims is None:
            raise InvalidTokenError()

        user_id = claims.get("id")
        if isinstance(user_id, bool) or not isinstance(user_id, (str, int)) or user_id == "":
            raise InvalidTokenError()

        credential = await self._store.find_by_id(str(user_id))
        if credential is None:
            logger.info("Token subject no longer exists", user_id=str(user_id))
            raise UserNotFoundError()

        return ValidationResult(user=credential.to_public())

    @track_auth_operation("request_reset")
    async def request_password_reset(self, email: Any) -> None:
        """
        Issue a password reset link if the account exists.

        Completes identically for unknown emails so callers cannot
        probe which addresses are registered.

        Raises:
            ValidationError: Missing email
        """
        email = normalize_email(email)
        if not email:
            raise ValidationError("Email is required.")
        if not _is_encodable(email):
            raise ValidationError("Email address is not valid.")

        credential = await self._store.find_by_email(email)
        if credential is None:
            logger.info("Password reset requested for unknown account", recipient=mask_email(email))
            return

        reset_token = secrets.token_hex(RESET_TOKEN_BYTES)
        token_digest = hashlib.sha256(reset_token.encode("ascii")).hexdigest()
        expires_at = datetime.now(timezone.utc) + self._reset_ttl
        await self._store.create_password_reset(credential.email, token_digest, expires_at)

        reset_link = f"{self._reset_link_base}/reset-password?token={reset_token}"
        await self._reset_link_sender(credential.email, reset_link)
        logger.info("Password reset issued", user_id=credential.id)

    def _issue_token(self, credential: Credential) -> str:
        return self._codec.sign({"id": credential.id, "email": credential.email})
