"""
Unit Tests for Password Hasher

Tests hash format, verification and malformed stored values.
"""

import hashlib

import pytest

from hervoice.domain.errors import HashingError
from hervoice.services.auth.password_hasher import KEY_BYTES, SALT_BYTES, PasswordHasher


class TestHash:
    """Tests for hash generation."""

    def test_baseline_format_is_salt_colon_key(self, hasher: PasswordHasher) -> None:
        """Baseline cost yields hex(salt):hex(key)."""
        stored = hasher.hash("pw123")
        salt_hex, key_hex = stored.split(":")

        assert len(salt_hex) == SALT_BYTES * 2
        assert len(key_hex) == KEY_BYTES * 2
        bytes.fromhex(salt_hex)
        bytes.fromhex(key_hex)

    def test_salt_is_randomized(self, hasher: PasswordHasher) -> None:
        """Same password twice gives different stored strings."""
        first = hasher.hash("pw123")
        second = hasher.hash("pw123")

        assert first != second
        assert first.split(":")[0] != second.split(":")[0]
        assert hasher.verify("pw123", first)
        assert hasher.verify("pw123", second)

    def test_matches_original_derivation(self, hasher: PasswordHasher) -> None:
        """Salt hex text is the PBKDF2 salt, as in earlier deployments."""
        stored = hasher.hash("pw123")
        salt_hex, key_hex = stored.split(":")

        expected = hashlib.pbkdf2_hmac("sha512", b"pw123", salt_hex.encode(), 10_000, 64)
        assert key_hex == expected.hex()

    def test_raised_cost_is_self_describing(self) -> None:
        """Non-baseline cost embeds the iteration count."""
        strong = PasswordHasher(iterations=12_000)
        stored = strong.hash("pw123")

        iterations, salt_hex, key_hex = stored.split(":")
        assert iterations == "12000"
        assert strong.verify("pw123", stored)

    def test_old_hashes_verify_after_cost_raise(self, hasher: PasswordHasher) -> None:
        """Raising the cost keeps baseline hashes valid."""
        stored = hasher.hash("pw123")
        strong = PasswordHasher(iterations=12_000)

        assert strong.verify("pw123", stored)

    def test_cost_below_baseline_rejected(self) -> None:
        with pytest.raises(ValueError):
            PasswordHasher(iterations=1_000)

    def test_primitive_failure_raises_hashing_error(self, hasher, monkeypatch) -> None:
        """Entropy failures surface as HashingError."""
        def broken(_n):
            raise OSError("no entropy")

        monkeypatch.setattr("hervoice.services.auth.password_hasher.secrets.token_bytes", broken)

        with pytest.raises(HashingError):
            hasher.hash("pw123")

    def test_unicode_password(self, hasher: PasswordHasher) -> None:
        stored = hasher.hash("pässwörd-🔒")
        assert hasher.verify("pässwörd-🔒", stored)
        assert not hasher.verify("passwword-🔒", stored)

    @pytest.mark.parametrize("password", ["pw\ud800", "\udc00pw", "pw\ud800x"])
    def test_unpaired_surrogate_password(self, hasher: PasswordHasher, password: str) -> None:
        """Any str hashes; unpaired surrogates never raise."""
        stored = hasher.hash(password)

        assert hasher.verify(password, stored)
        assert not hasher.verify("pw", stored)

    def test_unpaired_surrogate_hashes_as_replacement_char(self, hasher: PasswordHasher) -> None:
        """Matches the UTF-8 a JavaScript runtime derives from the same string."""
        salt_hex, key_hex = hasher.hash("pw\ud800x").split(":")

        expected = hashlib.pbkdf2_hmac("sha512", "pw\ufffdx".encode(), salt_hex.encode(), 10_000, 64)
        assert key_hex == expected.hex()


class TestVerify:
    """Tests for verification."""

    def test_correct_password(self, hasher: PasswordHasher) -> None:
        assert hasher.verify("pw123", hasher.hash("pw123"))

    def test_wrong_password(self, hasher: PasswordHasher) -> None:
        assert not hasher.verify("pw124", hasher.hash("pw123"))

    def test_empty_password_does_not_match(self, hasher: PasswordHasher) -> None:
        assert not hasher.verify("", hasher.hash("pw123"))

    @pytest.mark.parametrize(
        "stored",
        [
            "",
            "no-separator",
            ":",
            "abc:",
            ":abcd",
            "a:b:c:d",
            "00ff:not-hex",
            "00ff:abcd",  # key too short
            "x:00ff:" + "00" * 64,  # non-numeric cost
            "0:00ff:" + "00" * 64,  # zero cost
        ],
    )
    def test_malformed_stored_value_is_false(self, hasher: PasswordHasher, stored: str) -> None:
        """Malformed hashes never raise."""
        assert hasher.verify("pw123", stored) is False

    def test_non_string_stored_value_is_false(self, hasher: PasswordHasher) -> None:
        assert hasher.verify("pw123", None) is False  # type: ignore[arg-type]

    def test_placeholder_never_matches(self, hasher: PasswordHasher) -> None:
        assert not hasher.verify("", hasher.placeholder())
        assert not hasher.verify("pw123", hasher.placeholder())


class TestAsync:
    """Tests for worker pool execution."""

    @pytest.mark.asyncio
    async def test_async_round_trip(self, hasher: PasswordHasher) -> None:
        stored = await hasher.hash_async("pw123")

        assert await hasher.verify_async("pw123", stored)
        assert not await hasher.verify_async("wrong", stored)

    @pytest.mark.asyncio
    async def test_shutdown_then_reuse(self, hasher: PasswordHasher) -> None:
        """Pool is recreated lazily after shutdown."""
        await hasher.hash_async("pw123")
        hasher.shutdown()

        stored = await hasher.hash_async("pw123")
        assert hasher.verify("pw123", stored)
