# app/models/otp_session.py
from dataclasses import dataclass, replace
from datetime import datetime


@dataclass(frozen=True)
class OtpSession:
    email: str
    code: str
    issued_at: datetime
    verified: bool = False

    def mark_verified(self) -> "OtpSession":
        return replace(self, verified=True)

    def __repr__(self):
        return f"<OtpSession email={self.email} verified={self.verified}>"
