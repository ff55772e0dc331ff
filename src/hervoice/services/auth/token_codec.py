"""
Session Token Codec

Compact HMAC-SHA256 signed bearer tokens in JWT layout:

    base64url(header).base64url(payload).base64url(signature)

header  = {"alg":"HS256","typ":"JWT"}
payload = caller claims + iat + exp (unix seconds)

Tokens are stateless: there is no revocation list, a token stays
valid until its exp has passed.
"""

import base64
import binascii
import hashlib
import hmac
import json
import time
from datetime import timedelta
from typing import Any, Callable, Mapping, Optional

from hervoice.config.logging_config import get_logger

logger = get_logger(__name__)

HEADER = {"alg": "HS256", "typ": "JWT"}
DEFAULT_TTL = timedelta(days=7)


def _b64url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def _b64url_decode(segment: str) -> bytes:
    padding = -len(segment) % 4
    return base64.urlsafe_b64decode(segment + "=" * padding)


def _json_segment(value: Mapping[str, Any]) -> str:
    return _b64url_encode(json.dumps(value, separators=(",", ":")).encode("utf-8"))


class TokenCodec:
    """
    Signs and verifies session tokens with a process-wide secret.

    Usage:
        codec = TokenCodec(secret)
        token = codec.sign({"id": user_id, "email": email})
        claims = codec.verify(token)  # None when invalid or expired
    """

    def __init__(
        self,
        secret: str,
        default_ttl: timedelta = DEFAULT_TTL,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Initialize codec.

        Args:
            secret: Symmetric signing key
            default_ttl: Lifetime used when sign() gets no ttl
            clock: Source of the current unix time
        """
        if not secret:
            raise ValueError("Token secret must not be empty")
        self._key = secret.encode("utf-8")
        self._default_ttl = default_ttl
        self._clock = clock

    def sign(self, claims: Mapping[str, Any], ttl: Optional[timedelta] = None) -> str:
        """
        Create a signed token.

        Args:
            claims: Subject claims (at least id and email)
            ttl: Token lifetime, defaults to the codec default

        Returns:
            Compact token string
        """
        lifetime = ttl if ttl is not None else self._default_ttl
        now = int(self._clock())
        payload = {
            **claims,
            "iat": now,
            "exp": now + int(lifetime.total_seconds()),
        }

        signing_input = f"{_json_segment(HEADER)}.{_json_segment(payload)}"
        return f"{signing_input}.{self._signature(signing_input)}"

    def verify(self, token: str) -> Optional[dict[str, Any]]:
        """
        Verify a token and return its claims.

        Args:
            token: Compact token string

        Returns:
            Decoded claims, or None when malformed, forged or expired
        """
        if not isinstance(token, str):
            return None

        parts = token.split(".")
        if len(parts) != 3 or not all(parts):
            return None

        encoded_header, encoded_payload, signature = parts
        expected = self._signature(f"{encoded_header}.{encoded_payload}")
        if not hmac.compare_digest(signature.encode("ascii", "replace"), expected.encode("ascii")):
            return None

        try:
            header = json.loads(_b64url_decode(encoded_header))
            payload = json.loads(_b64url_decode(encoded_payload))
        except (binascii.Error, ValueError):
            logger.warning("Signed token has undecodable segments")
            return None

        if not isinstance(header, dict) or header.get("alg") != HEADER["alg"]:
            return None
        if not isinstance(payload, dict):
            return None

        exp = payload.get("exp")
        if isinstance(exp, bool) or not isinstance(exp, (int, float)):
            return None
        if exp < int(self._clock()):
            return None

        return payload

    def _signature(self, signing_input: str) -> str:
        digest = hmac.new(self._key, signing_input.encode("utf-8"), hashlib.sha256).digest()
        return _b64url_encode(digest)
