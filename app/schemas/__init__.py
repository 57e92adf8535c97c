# app/schemas/__init__.py
from .otp import (
    SendOtpRequest,
    VerifyOtpRequest,
    OtpResponse
)
from .payment import (
    CreateOrderRequest,
    PaymentVerifyRequest,
    PaymentVerifyResponse,
    PublicConfig
)

__all__ = [
    "SendOtpRequest",
    "VerifyOtpRequest",
    "OtpResponse",
    "CreateOrderRequest",
    "PaymentVerifyRequest",
    "PaymentVerifyResponse",
    "PublicConfig"
]
