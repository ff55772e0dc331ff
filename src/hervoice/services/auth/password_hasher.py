"""
Password Hasher

Salted PBKDF2-HMAC-SHA512 password hashing.

Stored format:
    hex(salt):hex(key)               at the baseline cost
    iterations:hex(salt):hex(key)    at any other cost

The salt fed to PBKDF2 is the ASCII hex text of the random salt, so
hashes written by earlier deployments of the service keep verifying.

ARCHITECTURE: Key derivation is CPU-bound. Request handlers must use
hash_async/verify_async, which run on a bounded thread pool instead
of the event loop.
"""

import asyncio
import hashlib
import hmac
import secrets
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from hervoice.config.logging_config import get_logger
from hervoice.config.settings import BASELINE_HASH_ITERATIONS
from hervoice.domain.errors import HashingError
from hervoice.infrastructure.metrics import observe_hash_duration

logger = get_logger(__name__)

SALT_BYTES = 16
KEY_BYTES = 64
DIGEST = "sha512"

# Upper bound accepted when parsing a stored cost
MAX_ITERATIONS = 10_000_000


def _password_bytes(password: str) -> bytes:
    """UTF-8 bytes of a password; unpaired surrogates become U+FFFD."""
    try:
        return password.encode("utf-8")
    except UnicodeEncodeError:
        # Same bytes a JavaScript runtime produces for the string
        repaired = password.encode("utf-16-le", "surrogatepass").decode("utf-16-le", "replace")
        return repaired.encode("utf-8")


class PasswordHasher:
    """
    Derives and verifies salted password hashes.

    Usage:
        hasher = PasswordHasher(iterations=10_000)
        stored = await hasher.hash_async("pw123")
        ok = await hasher.verify_async("pw123", stored)
        hasher.shutdown()
    """

    def __init__(
        self,
        iterations: int = BASELINE_HASH_ITERATIONS,
        max_workers: int = 4,
    ) -> None:
        """
        Initialize hasher.

        Args:
            iterations: PBKDF2 iteration count for new hashes
            max_workers: Thread pool size for async hashing
        """
        if iterations < BASELINE_HASH_ITERATIONS:
            raise ValueError(f"iterations must be at least {BASELINE_HASH_ITERATIONS}")
        self._iterations = iterations
        self._max_workers = max_workers
        self._executor: Optional[ThreadPoolExecutor] = None

    @property
    def iterations(self) -> int:
        return self._iterations

    def hash(self, password: str) -> str:
        """
        Hash a password with a fresh random salt.

        Args:
            password: Plaintext password

        Returns:
            Stored hash string

        Raises:
            HashingError: If the entropy source or PBKDF2 fails
        """
        started_at = time.perf_counter()
        try:
            salt_hex = secrets.token_bytes(SALT_BYTES).hex()
            key = self._derive(password, salt_hex, self._iterations)
        except (OSError, ValueError, OverflowError) as e:
            logger.error("Password hashing failed", error_type=type(e).__name__)
            raise HashingError() from e
        finally:
            observe_hash_duration("hash", started_at)

        if self._iterations == BASELINE_HASH_ITERATIONS:
            return f"{salt_hex}:{key.hex()}"
        return f"{self._iterations}:{salt_hex}:{key.hex()}"

    def verify(self, password: str, stored: str) -> bool:
        """
        Check a password against a stored hash.

        Malformed stored values are treated as a wrong password.

        Args:
            password: Plaintext password
            stored: Stored hash string

        Returns:
            True iff the derived key matches exactly
        """
        parsed = self._parse(stored)
        if parsed is None:
            return False

        iterations, salt_hex, expected = parsed
        started_at = time.perf_counter()
        try:
            derived = self._derive(password, salt_hex, iterations)
        except (ValueError, OverflowError):
            return False
        finally:
            observe_hash_duration("verify", started_at)

        return hmac.compare_digest(derived, expected)

    def placeholder(self) -> str:
        """
        Well-formed hash at the current cost that no password matches.

        Verifying against it costs the same as a real verification,
        which keeps unknown-account logins from returning early.
        """
        salt_hex = "0" * (SALT_BYTES * 2)
        key_hex = "0" * (KEY_BYTES * 2)
        if self._iterations == BASELINE_HASH_ITERATIONS:
            return f"{salt_hex}:{key_hex}"
        return f"{self._iterations}:{salt_hex}:{key_hex}"

    async def hash_async(self, password: str) -> str:
        """Hash on the worker pool."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._get_executor(), self.hash, password)

    async def verify_async(self, password: str, stored: str) -> bool:
        """Verify on the worker pool."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._get_executor(), self.verify, password, stored)

    def shutdown(self) -> None:
        """Release the worker pool."""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def _get_executor(self) -> ThreadPoolExecutor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self._max_workers,
                thread_name_prefix="pbkdf2",
            )
        return self._executor

    @staticmethod
    def _derive(password: str, salt_hex: str, iterations: int) -> bytes:
        return hashlib.pbkdf2_hmac(
            DIGEST,
            _password_bytes(password),
            salt_hex.encode("ascii"),
            iterations,
            KEY_BYTES,
        )

    @staticmethod
    def _parse(stored: str) -> Optional[tuple[int, str, bytes]]:
        """Split a stored hash into (iterations, salt_hex, key) or None."""
        if not isinstance(stored, str):
            return None

        parts = stored.split(":")
        if len(parts) == 2:
            iterations = BASELINE_HASH_ITERATIONS
            salt_hex, key_hex = parts
        elif len(parts) == 3:
            if not parts[0].isdecimal():
                return None
            iterations = int(parts[0])
            salt_hex, key_hex = parts[1], parts[2]
        else:
            return None

        if not salt_hex or not salt_hex.isascii() or not 1 <= iterations <= MAX_ITERATIONS:
            return None

        try:
            key = bytes.fromhex(key_hex)
        except ValueError:
            return None

        if len(key) != KEY_BYTES:
            return None
        return iterations, salt_hex, key
