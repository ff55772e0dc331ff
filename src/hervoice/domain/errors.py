"""
Authentication Error Taxonomy

Every failure the account flows can produce. Each error carries a
machine-readable code and a short user-facing message; neither ever
contains stack traces, database messages or credential material.

HTTP status mapping happens at the API boundary, not here.
"""


class AuthError(Exception):
    """Base class for all account-flow failures."""

    code: str = "AUTH_ERROR"
    default_message: str = "Authentication failed."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AuthError):
    """Missing or malformed input; the client can correct it."""

    code = "VALIDATION_ERROR"
    default_message = "Invalid request."


class DuplicateUserError(AuthError):
    """An account with this email already exists."""

    code = "USER_EXISTS"
    default_message = "User already exists."


class InvalidCredentialsError(AuthError):
    """
    Login failed.

    Deliberately identical for unknown email and wrong password
    so responses never reveal whether an account exists.
    """

    code = "INVALID_CREDENTIALS"
    default_message = "Invalid email or password."


class MissingTokenError(AuthError):
    """No bearer token was supplied."""

    code = "MISSING_TOKEN"
    default_message = "No token provided."


class InvalidTokenError(AuthError):
    """Token is malformed, forged or expired."""

    code = "INVALID_TOKEN"
    default_message = "Invalid token."


class UserNotFoundError(AuthError):
    """Token is valid but its account no longer exists."""

    code = "USER_NOT_FOUND"
    default_message = "User not found."


class InternalError(AuthError):
    """Unexpected store or crypto failure."""

    code = "INTERNAL_ERROR"
    default_message = "Internal Server Error"


class HashingError(InternalError):
    """Entropy source or key-derivation primitive failed."""
