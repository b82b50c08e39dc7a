"""Time-boxed one-time codes.

Registration and password reset both prove control of an email address with
a short numeric code. They keep their codes in different places (a pending
registration row vs. inline on the user) and compare them slightly
differently, but the expiry rule and the checks themselves live here.
"""
import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta

from app.config import settings
from app.utils.exceptions import ExpiredError, InvalidInputError

logger = logging.getLogger(__name__)


def generate_otp(length: int | None = None) -> str:
    length = length or settings.OTP_LENGTH
    low = 10 ** (length - 1)
    return str(low + secrets.randbelow(9 * low))


def otp_expiry(now: datetime | None = None) -> datetime:
    return (now or datetime.utcnow()) + timedelta(minutes=settings.OTP_EXPIRE_MINUTES)


def is_expired(expires_at: datetime | None, now: datetime | None = None) -> bool:
    if expires_at is None:
        return True
    return (now or datetime.utcnow()) > expires_at


@dataclass
class OtpChallenge:
    subject: str
    code: str | None
    expires_at: datetime | None
    single_use: bool = True
    strip_input: bool = False

    def matches(self, submitted) -> bool:
        if self.code is None or submitted is None:
            return False
        if self.strip_input:
            return self.code.strip() == str(submitted).strip()
        return self.code == submitted

    def verify(self, submitted, now: datetime | None = None) -> None:
        """Raise on a wrong code first, then on an elapsed window."""
        if not self.matches(submitted):
            logger.info("OTP mismatch for %s", self.subject)
            raise InvalidInputError("Invalid OTP")
        if is_expired(self.expires_at, now):
            logger.info("OTP expired for %s", self.subject)
            raise ExpiredError("OTP expired")

    def verify_combined(self, submitted, now: datetime | None = None) -> None:
        """Same checks, reported as a single error kind."""
        if not self.matches(submitted) or is_expired(self.expires_at, now):
            logger.info("OTP rejected for %s", self.subject)
            raise InvalidInputError("Invalid or expired OTP")
