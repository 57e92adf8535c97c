import hashlib
import hmac
import logging
import secrets
from typing import Any, Dict, Optional

import httpx

from app.config import Settings
from app.errors import DeliveryFailure, InvalidInput, PaymentDeliveryFailure, SignatureMismatch, UpstreamFailure
from app.services.otp_service import OtpService
from app.utils.otp import is_valid_email

logger = logging.getLogger(__name__)


def generate_receipt() -> str:
    return f"receipt_order_{secrets.token_hex(4)}"


def compute_payment_signature(order_id: str, payment_id: str, secret: str) -> str:
    """Hex HMAC-SHA256 of "<order_id>|<payment_id>", as Razorpay signs checkout callbacks."""
    body = f"{order_id}|{payment_id}"
    return hmac.new(secret.encode("utf-8"), body.encode("utf-8"), hashlib.sha256).hexdigest()


def verify_payment_signature(order_id: Optional[str], payment_id: Optional[str], signature: Optional[str], secret: str) -> bool:
    if not order_id or not payment_id or not signature or not secret:
        return False
    expected = compute_payment_signature(order_id, payment_id, secret)
    return hmac.compare_digest(expected.encode("utf-8"), signature.encode("utf-8"))


class RazorpayClient:
    """Thin async wrapper over the Razorpay Orders API."""

    def __init__(self, key_id: str, key_secret: str, base_url: str = "https://api.razorpay.com/v1", timeout: float = 15.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.key_id = key_id
        self.key_secret = key_secret
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def create_order(self, amount: int, currency: str, receipt: str, notes: Dict[str, str]) -> Dict[str, Any]:
        payload = {"amount": amount, "currency": currency, "receipt": receipt, "notes": notes}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    f"{self.base_url}/orders",
                    json=payload,
                    auth=(self.key_id, self.key_secret),
                )
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"[Razorpay] HTTP error creating order: {e.response.status_code} {e.response.text}")
            raise UpstreamFailure() from e
        except httpx.HTTPError as e:
            logger.error(f"[Razorpay] Request error creating order: {e}")
            raise UpstreamFailure() from e
        except ValueError as e:
            logger.error(f"[Razorpay] Unreadable order response: {e}")
            raise UpstreamFailure() from e


class PaymentService:
    def __init__(self, settings: Settings, otp_service: OtpService, gateway: RazorpayClient, email_service):
        self.settings = settings
        self.otp_service = otp_service
        self.gateway = gateway
        self.email_service = email_service

    async def create_order(self, email: str) -> Dict[str, Any]:
        self.otp_service.require_verified(email)

        # On failure the verified session stays, so the client can retry without a new OTP.
        order = await self.gateway.create_order(
            amount=self.settings.ORDER_AMOUNT,
            currency=self.settings.ORDER_CURRENCY,
            receipt=generate_receipt(),
            notes={"user_email": email},
        )
        logger.info(f"Order {order.get('id')} created for {email}")
        return order

    async def verify_payment(self, order_id: Optional[str], payment_id: Optional[str], signature: Optional[str], email: Optional[str]) -> Dict[str, str]:
        if not verify_payment_signature(order_id, payment_id, signature, self.settings.RAZORPAY_KEY_SECRET):
            logger.warning(f"Invalid payment signature for order {order_id}")
            raise SignatureMismatch()

        logger.info(f"Payment verified for: {email}")
        if not is_valid_email(email):
            raise InvalidInput("Valid email is required")

        try:
            await self.email_service.send_collection_email(email)
        except DeliveryFailure as e:
            raise PaymentDeliveryFailure() from e

        logger.info(f"Image collection sent to: {email}")
        self.otp_service.clear(email)
        return {"status": "success", "message": "Payment successful and images sent!"}
