# app/routes/otp.py
from fastapi import APIRouter, Depends

from app.dependencies import get_otp_service
from app.schemas.otp import OtpResponse, SendOtpRequest, VerifyOtpRequest
from app.services.otp_service import OtpService

router = APIRouter(prefix="/api", tags=["Email Verification"])


@router.post("/send-otp", response_model=OtpResponse)
async def send_otp(payload: SendOtpRequest, otp_service: OtpService = Depends(get_otp_service)):
    """Email a fresh 6-digit code, replacing any earlier one for this address."""
    await otp_service.issue(payload.email)
    return OtpResponse(success=True, message="OTP sent successfully")


@router.post("/verify-otp", response_model=OtpResponse)
async def verify_otp(payload: VerifyOtpRequest, otp_service: OtpService = Depends(get_otp_service)):
    otp_service.verify(payload.email, payload.otp)
    return OtpResponse(success=True, message="Email verified successfully")
