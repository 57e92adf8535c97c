# app/errors.py
from typing import Any, Dict


class ServiceError(Exception):
    """Base for failures that map straight onto an HTTP response."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_response(self) -> Dict[str, Any]:
        return {"error": self.message}


# -------------------- REQUEST --------------------
class InvalidInput(ServiceError):
    status_code = 400
    default_message = "Invalid request"


# -------------------- OTP WORKFLOW --------------------
class NoSessionFound(ServiceError):
    status_code = 400
    default_message = "Please request an OTP first."


class Expired(ServiceError):
    status_code = 400
    default_message = "OTP expired. Please request a new one."


class Mismatch(ServiceError):
    status_code = 400
    default_message = "Invalid OTP."


# -------------------- AUTHORIZATION --------------------
class NotVerified(ServiceError):
    status_code = 403
    default_message = "Email not verified."


# -------------------- PAYMENT --------------------
class SignatureMismatch(ServiceError):
    status_code = 400
    default_message = "Invalid payment signature."

    def to_response(self) -> Dict[str, Any]:
        return {"status": "error", "message": self.message}


# -------------------- COLLABORATORS --------------------
class UpstreamFailure(ServiceError):
    status_code = 500
    default_message = "Failed to create order"


class DeliveryFailure(ServiceError):
    status_code = 500
    default_message = "Failed to send email"


class PaymentDeliveryFailure(DeliveryFailure):
    """Signature was valid but the collection email could not be sent."""

    default_message = "Payment verified, but email failed."

    def to_response(self) -> Dict[str, Any]:
        return {"status": "error", "message": self.message, "payment_verified": True}
