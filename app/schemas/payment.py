from pydantic import BaseModel
from typing import Optional

class CreateOrderRequest(BaseModel):
    email: Optional[str] = None

class PaymentVerifyRequest(BaseModel):
    razorpay_order_id: Optional[str] = None
    razorpay_payment_id: Optional[str] = None
    razorpay_signature: Optional[str] = None
    email: Optional[str] = None

class PaymentVerifyResponse(BaseModel):
    status: str
    message: str

class PublicConfig(BaseModel):
    razorpayKeyId: str
