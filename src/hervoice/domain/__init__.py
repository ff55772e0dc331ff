"""
HerVoice Domain Layer

Account models and the error taxonomy shared by every layer.
"""

from hervoice.domain.models import AuthResult, Credential, PublicUser, ValidationResult

__all__ = [
    "AuthResult",
    "Credential",
    "PublicUser",
    "ValidationResult",
]
