# app/services/otp_service.py
from datetime import datetime, timedelta, timezone
from typing import Callable, Union
import logging

from app.errors import DeliveryFailure, Expired, InvalidInput, Mismatch, NoSessionFound, NotVerified
from app.models.otp_session import OtpSession
from app.services.otp_store import InMemoryOtpStore
from app.utils.otp import generate_otp, is_otp_expired, is_valid_email, normalize_code

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class OtpService:
    """
    Email ownership check: issue a code, verify it, and gate later steps
    on the verified flag.
    """

    def __init__(
        self,
        store: InMemoryOtpStore,
        email_service,
        ttl: timedelta = timedelta(minutes=5),
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.email_service = email_service
        self.ttl = ttl
        self.clock = clock

    async def issue(self, email: str) -> None:
        if not is_valid_email(email):
            raise InvalidInput("Valid email is required")

        code = generate_otp()
        session = OtpSession(email=email, code=code, issued_at=self.clock())
        self.store.set(email, session)

        try:
            await self.email_service.send_otp_email(email, code, expires_in_minutes=self._ttl_minutes())
        except DeliveryFailure as e:
            # Nobody can verify a code that never arrived. A newer issue for the
            # same email may have replaced this session meanwhile; leave that one.
            discarded = self.store.delete_if_current(email, session)
            logger.error(f"OTP delivery failed for {email}; session discarded={discarded}")
            raise DeliveryFailure("Failed to send OTP") from e

        logger.info(f"OTP sent to: {email}")

    def verify(self, email: str, otp: Union[int, str, None]) -> OtpSession:
        submitted = normalize_code(otp)
        if not email or submitted is None:
            raise InvalidInput("Email and OTP are required")

        session = self.store.get(email)
        if session is None:
            raise NoSessionFound()

        if is_otp_expired(session.issued_at, self.clock(), self.ttl):
            self.store.delete(email)
            raise Expired()

        # Left in place on mismatch so the user can retry until expiry.
        if session.code != submitted:
            raise Mismatch()

        verified = session.mark_verified()
        self.store.set(email, verified)
        logger.info(f"Email verified: {email}")
        return verified

    def require_verified(self, email: str) -> OtpSession:
        session = self.store.get(email) if email else None
        if session is None or not session.verified:
            raise NotVerified()
        return session

    def clear(self, email: str) -> None:
        self.store.delete(email)

    def _ttl_minutes(self) -> int:
        return int(self.ttl.total_seconds() // 60)
