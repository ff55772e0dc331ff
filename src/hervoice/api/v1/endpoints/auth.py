"""
Auth Endpoints

Thin HTTP adapters over AuthService: parse the request, call the
service, shape the response. Errors are mapped to statuses by the
handlers in hervoice.api.middleware.error_handler.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Header, status
from pydantic import BaseModel, ConfigDict, Field

from hervoice.api.dependencies import extract_bearer_token, get_auth_service
from hervoice.domain.models import AuthResult
from hervoice.services.auth import AuthService

router = APIRouter()


# Request/Response Models

class SignupRequest(BaseModel):
    """Account registration request."""

    email: Optional[str] = Field(default=None, description="Email address")
    password: Optional[str] = Field(default=None, description="Plaintext password")
    name: Optional[str] = Field(default=None, description="Display name")


class LoginRequest(BaseModel):
    """Email and password login request."""

    email: Optional[str] = None
    password: Optional[str] = None


class ResetRequest(BaseModel):
    """Password reset link request."""

    email: Optional[str] = None


class UserResponse(BaseModel):
    """Client-visible account."""

    id: str
    email: str
    name: str


class AuthResponse(BaseModel):
    """Token and account returned by signup and login."""

    message: str
    token: str
    user: UserResponse

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "message": "Login successful.",
                "token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9.eyJpZCI6Ii4uLiJ9.c2ln",
                "user": {
                    "id": "123e4567-e89b-12d3-a456-426614174000",
                    "email": "a@x.com",
                    "name": "Jane",
                },
            }
        }
    )


class ValidateResponse(BaseModel):
    """Resolved principal for a bearer token."""

    valid: bool
    user: UserResponse


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str


def _auth_response(message: str, result: AuthResult) -> AuthResponse:
    return AuthResponse(
        message=message,
        token=result.token,
        user=UserResponse(**result.user.to_dict()),
    )


@router.post(
    "/signup",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an account",
)
async def signup(
    request: SignupRequest,
    service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """Register a new account and return a session token."""
    result = await service.signup(request.email, request.password, request.name)
    return _auth_response("User registered successfully.", result)


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Log in with email and password",
)
async def login(
    request: LoginRequest,
    service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """Authenticate and return a session token."""
    result = await service.login(request.email, request.password)
    return _auth_response("Login successful.", result)


@router.get(
    "/validate",
    response_model=ValidateResponse,
    summary="Validate a bearer token",
)
async def validate(
    authorization: Optional[str] = Header(default=None),
    service: AuthService = Depends(get_auth_service),
) -> ValidateResponse:
    """Resolve the current account from the Authorization header."""
    result = await service.validate(extract_bearer_token(authorization))
    return ValidateResponse(valid=result.valid, user=UserResponse(**result.user.to_dict()))


@router.post(
    "/request-reset",
    response_model=MessageResponse,
    summary="Request a password reset link",
)
async def request_reset(
    request: ResetRequest,
    service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    """
    Send a reset link if the account exists.

    The response is identical either way to prevent email enumeration.
    """
    await service.request_password_reset(request.email)
    return MessageResponse(message="If an account exists, a reset link has been sent.")
