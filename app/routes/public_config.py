# app/routes/public_config.py
from fastapi import APIRouter, Depends

from app.config import Settings
from app.dependencies import get_settings
from app.schemas.payment import PublicConfig

router = APIRouter(prefix="/api", tags=["Config"])


@router.get("/config", response_model=PublicConfig)
def public_config(config: Settings = Depends(get_settings)):
    """Public keys only; the gateway secret never leaves the server."""
    return PublicConfig(razorpayKeyId=config.RAZORPAY_KEY_ID)
