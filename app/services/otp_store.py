# app/services/otp_store.py
import threading
from typing import Dict, Optional

from app.models.otp_session import OtpSession


class InMemoryOtpStore:
    """
    Process-wide OTP sessions keyed by email.
    Lost on restart; swap for a shared store if the service ever scales out.
    """

    def __init__(self):
        self._sessions: Dict[str, OtpSession] = {}
        self._lock = threading.Lock()

    def get(self, email: str) -> Optional[OtpSession]:
        with self._lock:
            return self._sessions.get(email)

    def set(self, email: str, session: OtpSession) -> None:
        with self._lock:
            self._sessions[email] = session

    def delete(self, email: str) -> None:
        with self._lock:
            self._sessions.pop(email, None)

    def delete_if_current(self, email: str, session: OtpSession) -> bool:
        """Delete only if `session` (by identity) is still the stored one."""
        with self._lock:
            if self._sessions.get(email) is not session:
                return False
            del self._sessions[email]
            return True

    def __contains__(self, email: str) -> bool:
        with self._lock:
            return email in self._sessions

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
