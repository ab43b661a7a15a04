"""Session identifiers and OTP join codes."""

import hmac
import re
import secrets
from datetime import datetime, timedelta
from uuid import UUID, uuid4

OTP_LENGTH = 6
OTP_PATTERN = re.compile(r"[0-9]{6}")


def generate_session_id() -> UUID:
    """Return a new random session identifier."""
    return uuid4()


def generate_otp() -> str:
    """Return a zero-padded 6-digit numeric join code."""
    return f"{secrets.randbelow(10**OTP_LENGTH):0{OTP_LENGTH}d}"


def is_valid_otp(value: str) -> bool:
    """Check that a value is exactly six ASCII digits."""
    return bool(OTP_PATTERN.fullmatch(value))


def otp_expiry(now: datetime, ttl_hours: int) -> datetime:
    """Return when an OTP issued at ``now`` stops being accepted."""
    return now + timedelta(hours=ttl_hours)


def otp_matches(expected: str, given: str) -> bool:
    """Compare two OTPs in constant time."""
    return hmac.compare_digest(expected.encode(), given.encode())
