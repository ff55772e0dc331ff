"""
Unit Tests for Token Codec

Tests token layout, signature checks and expiry.
"""

import base64
import hashlib
import hmac
import json
from datetime import timedelta

import pytest

from hervoice.services.auth.token_codec import TokenCodec

SECRET = "test_secret_key_for_token_signing_min_32_chars"


class FakeClock:
    """Manually advanced unix clock."""

    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def _b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode()


def _decode(segment: str) -> dict:
    return json.loads(base64.urlsafe_b64decode(segment + "=" * (-len(segment) % 4)))


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def timed_codec(clock: FakeClock) -> TokenCodec:
    return TokenCodec(SECRET, clock=clock)


class TestSign:
    """Tests for token creation."""

    def test_three_padding_free_segments(self, timed_codec: TokenCodec) -> None:
        token = timed_codec.sign({"id": "u1", "email": "a@x.com"})
        parts = token.split(".")

        assert len(parts) == 3
        assert all("=" not in part for part in parts)

    def test_header_and_payload(self, timed_codec: TokenCodec, clock: FakeClock) -> None:
        token = timed_codec.sign({"id": "u1", "email": "a@x.com"})
        header, payload, _ = token.split(".")

        assert _decode(header) == {"alg": "HS256", "typ": "JWT"}
        claims = _decode(payload)
        assert claims["id"] == "u1"
        assert claims["email"] == "a@x.com"
        assert claims["iat"] == int(clock.now)
        assert claims["exp"] == int(clock.now) + 7 * 24 * 60 * 60

    def test_signature_is_hmac_sha256_of_signing_input(self, timed_codec: TokenCodec) -> None:
        """Bit-compatible with any HS256 verifier."""
        token = timed_codec.sign({"id": "u1", "email": "a@x.com"})
        header, payload, signature = token.split(".")

        expected = hmac.new(SECRET.encode(), f"{header}.{payload}".encode(), hashlib.sha256).digest()
        assert signature == _b64url(expected)

    def test_deterministic_for_same_instant(self, timed_codec: TokenCodec) -> None:
        claims = {"id": "u1", "email": "a@x.com"}
        assert timed_codec.sign(claims) == timed_codec.sign(claims)

    def test_custom_ttl(self, timed_codec: TokenCodec, clock: FakeClock) -> None:
        token = timed_codec.sign({"id": "u1"}, ttl=timedelta(minutes=5))
        claims = _decode(token.split(".")[1])

        assert claims["exp"] - claims["iat"] == 300

    def test_empty_secret_rejected(self) -> None:
        with pytest.raises(ValueError):
            TokenCodec("")


class TestVerify:
    """Tests for token verification."""

    def test_valid_token_returns_claims(self, timed_codec: TokenCodec) -> None:
        token = timed_codec.sign({"id": "u1", "email": "a@x.com"})
        claims = timed_codec.verify(token)

        assert claims is not None
        assert claims["id"] == "u1"
        assert claims["email"] == "a@x.com"

    def test_valid_until_expiry_instant(self, timed_codec: TokenCodec, clock: FakeClock) -> None:
        token = timed_codec.sign({"id": "u1"}, ttl=timedelta(seconds=60))

        clock.now += 60
        assert timed_codec.verify(token) is not None

    def test_expired_token_is_none(self, timed_codec: TokenCodec, clock: FakeClock) -> None:
        token = timed_codec.sign({"id": "u1"}, ttl=timedelta(seconds=60))

        clock.now += 61
        assert timed_codec.verify(token) is None

    @pytest.mark.parametrize("token", ["", "abc", "a.b", "a.b.c.d", "..", "a..c"])
    def test_wrong_segment_count_is_none(self, timed_codec: TokenCodec, token: str) -> None:
        assert timed_codec.verify(token) is None

    def test_non_string_is_none(self, timed_codec: TokenCodec) -> None:
        assert timed_codec.verify(None) is None  # type: ignore[arg-type]

    def test_every_payload_mutation_is_rejected(self, timed_codec: TokenCodec) -> None:
        """Changing any payload character invalidates the signature."""
        token = timed_codec.sign({"id": "u1", "email": "a@x.com"})
        header, payload, signature = token.split(".")

        for i, char in enumerate(payload):
            replacement = "A" if char != "A" else "B"
            mutated = payload[:i] + replacement + payload[i + 1:]
            assert timed_codec.verify(f"{header}.{mutated}.{signature}") is None

    def test_wrong_secret_is_none(self, timed_codec: TokenCodec, clock: FakeClock) -> None:
        forged = TokenCodec("another_secret_key_that_is_32_chars_long", clock=clock)
        token = forged.sign({"id": "u1", "email": "a@x.com"})

        assert timed_codec.verify(token) is None

    def test_tampered_signature_is_none(self, timed_codec: TokenCodec) -> None:
        token = timed_codec.sign({"id": "u1"})
        header, payload, signature = token.split(".")
        flipped = ("A" if signature[0] != "A" else "B") + signature[1:]

        assert timed_codec.verify(f"{header}.{payload}.{flipped}") is None

    def test_non_ascii_signature_is_none(self, timed_codec: TokenCodec) -> None:
        token = timed_codec.sign({"id": "u1"})
        header, payload, _ = token.split(".")

        assert timed_codec.verify(f"{header}.{payload}.sïgnature") is None

    def _signed(self, header: dict, payload, secret: str = SECRET) -> str:
        h = _b64url(json.dumps(header).encode())
        p = _b64url(json.dumps(payload).encode())
        sig = hmac.new(secret.encode(), f"{h}.{p}".encode(), hashlib.sha256).digest()
        return f"{h}.{p}.{_b64url(sig)}"

    def test_correctly_signed_without_exp_is_none(self, timed_codec: TokenCodec) -> None:
        token = self._signed({"alg": "HS256", "typ": "JWT"}, {"id": "u1"})
        assert timed_codec.verify(token) is None

    def test_correctly_signed_non_object_payload_is_none(self, timed_codec: TokenCodec) -> None:
        token = self._signed({"alg": "HS256", "typ": "JWT"}, ["id", "u1"])
        assert timed_codec.verify(token) is None

    def test_correctly_signed_other_alg_is_none(self, timed_codec: TokenCodec, clock: FakeClock) -> None:
        token = self._signed({"alg": "none", "typ": "JWT"}, {"id": "u1", "exp": int(clock.now) + 60})
        assert timed_codec.verify(token) is None

    def test_correctly_signed_garbage_payload_is_none(self, timed_codec: TokenCodec) -> None:
        h = _b64url(json.dumps({"alg": "HS256", "typ": "JWT"}).encode())
        p = _b64url(b"not json")
        sig = hmac.new(SECRET.encode(), f"{h}.{p}".encode(), hashlib.sha256).digest()

        assert timed_codec.verify(f"{h}.{p}.{_b64url(sig)}") is None

    def test_externally_signed_token_verifies(self, timed_codec: TokenCodec, clock: FakeClock) -> None:
        """Tokens from another HS256 signer with the same secret are accepted."""
        token = self._signed(
            {"alg": "HS256", "typ": "JWT"},
            {"id": "u1", "email": "a@x.com", "iat": int(clock.now), "exp": int(clock.now) + 60},
        )
        claims = timed_codec.verify(token)

        assert claims is not None
        assert claims["id"] == "u1"
