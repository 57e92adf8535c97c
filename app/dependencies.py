# app/dependencies.py
from datetime import datetime, timedelta
from typing import Callable

from fastapi import Depends

from app.config import Settings, settings
from app.services.email_service import EmailService
from app.services.otp_service import OtpService, utc_now
from app.services.otp_store import InMemoryOtpStore
from app.services.payment_service import PaymentService, RazorpayClient

# One store for the whole process; tests override get_otp_store.
otp_store = InMemoryOtpStore()


def get_settings() -> Settings:
    return settings


def get_otp_store() -> InMemoryOtpStore:
    return otp_store


def get_clock() -> Callable[[], datetime]:
    return utc_now


def get_email_service(config: Settings = Depends(get_settings)) -> EmailService:
    return EmailService(config)


def get_gateway(config: Settings = Depends(get_settings)) -> RazorpayClient:
    return RazorpayClient(config.RAZORPAY_KEY_ID, config.RAZORPAY_KEY_SECRET, base_url=config.RAZORPAY_API_URL)


def get_otp_service(
    config: Settings = Depends(get_settings),
    store: InMemoryOtpStore = Depends(get_otp_store),
    email_service: EmailService = Depends(get_email_service),
    clock: Callable[[], datetime] = Depends(get_clock),
) -> OtpService:
    return OtpService(store, email_service, ttl=timedelta(minutes=config.OTP_EXPIRE_MINUTES), clock=clock)


def get_payment_service(
    config: Settings = Depends(get_settings),
    otp_service: OtpService = Depends(get_otp_service),
    gateway: RazorpayClient = Depends(get_gateway),
    email_service: EmailService = Depends(get_email_service),
) -> PaymentService:
    return PaymentService(config, otp_service, gateway, email_service)
