# app/models/__init__.py

from .otp_session import OtpSession

__all__ = ["OtpSession"]
