from fastapi import APIRouter, Depends

from app.dependencies import get_payment_service
from app.schemas.payment import CreateOrderRequest, PaymentVerifyRequest, PaymentVerifyResponse
from app.services.payment_service import PaymentService

router = APIRouter(prefix="/api", tags=["Payment"])

@router.post("/create-order")
async def create_order(data: CreateOrderRequest, payments: PaymentService = Depends(get_payment_service)):
    # Gateway order object is returned untouched for the checkout widget.
    return await payments.create_order(data.email)

@router.post("/verify-payment", response_model=PaymentVerifyResponse)
async def verify_payment(data: PaymentVerifyRequest, payments: PaymentService = Depends(get_payment_service)):
    return await payments.verify_payment(
        data.razorpay_order_id,
        data.razorpay_payment_id,
        data.razorpay_signature,
        data.email,
    )
