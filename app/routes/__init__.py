# Import all routes
from .public_config import router as public_config_router
from .otp import router as otp_router
from .payment import router as payment_router

# All routers that should be included in main app
__all__ = [
    "public_config_router",
    "otp_router",
    "payment_router"
]
