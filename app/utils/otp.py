# app/utils/otp.py
from datetime import datetime, timedelta
import re
import secrets
from typing import Optional, Union

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
DEFAULT_OTP_TTL = timedelta(minutes=5)


# -------------------- EMAIL SHAPE --------------------
def is_valid_email(email: Optional[str]) -> bool:
    """Loose shape check: something@something.something, no whitespace."""
    if not email or not isinstance(email, str):
        return False
    return EMAIL_PATTERN.match(email) is not None


# -------------------- OTP GENERATOR --------------------
def generate_otp() -> str:
    """Generate a 6-digit numeric OTP in [100000, 999999]."""
    return str(100000 + secrets.randbelow(900000))


# -------------------- EXPIRY --------------------
def is_otp_expired(issued_at: datetime, now: datetime, ttl: timedelta = DEFAULT_OTP_TTL) -> bool:
    return now - issued_at > ttl


# -------------------- NORMALIZER --------------------
def normalize_code(code: Union[int, str, None]) -> Optional[str]:
    """
    Submitted codes may arrive as JSON numbers or strings.
    Returns the canonical string form, or None when nothing usable was sent.
    """
    if code is None or isinstance(code, bool):
        return None
    normalized = str(code).strip()
    return normalized or None
