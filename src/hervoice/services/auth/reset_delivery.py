"""
Password Reset Link Delivery

E-mail delivery is not wired up yet; the default sender simulates it
by writing the reset link to the structured log. The link itself is
only logged in development.
"""

from typing import Awaitable, Callable

from hervoice.config.logging_config import get_logger

logger = get_logger(__name__)

# (recipient_email, reset_link) -> None
ResetLinkSender = Callable[[str, str], Awaitable[None]]


def mask_email(email: str) -> str:
    """Keep the first three characters of an address for log correlation."""
    return f"{email[:3]}***"


class LoggingResetLinkSender:
    """Simulated reset e-mail that writes to the application log."""

    def __init__(self, include_link: bool = False) -> None:
        self._include_link = include_link

    async def __call__(self, email: str, reset_link: str) -> None:
        if self._include_link:
            logger.info(
                "[SIMULATION] Password reset e-mail",
                recipient=mask_email(email),
                reset_link=reset_link,
            )
        else:
            logger.info("[SIMULATION] Password reset e-mail", recipient=mask_email(email))
