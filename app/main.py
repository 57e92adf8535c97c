from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import datetime
import logging
import os

from app.config import settings
from app.errors import InvalidInput, ServiceError

# Init app
app = FastAPI(title="BAZINGA! Backend", version="1.0.0")

# Enable logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# CORS Setup
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials="*" not in settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Route Registrations
from app.routes.public_config import router as public_config_router
from app.routes.otp import router as otp_router
from app.routes.payment import router as payment_router

routers = [
    public_config_router,
    otp_router,
    payment_router,
]

for router in routers:
    app.include_router(router)
    logger.info(f"Included router: {router.prefix} {router.tags}")

@app.get("/", include_in_schema=False)
async def root():
    return {
        "status": "ok",
        "message": "BAZINGA! backend is running",
        "version": app.version,
        "endpoints": [
            "/api/config - Public payment key",
            "/api/send-otp, /api/verify-otp - Email verification",
            "/api/create-order, /api/verify-payment - Checkout",
            "/health - System health check"
        ]
    }

# Health check endpoint with detailed information
@app.get("/health", include_in_schema=False)
async def health_check():
    import psutil

    return {
        "status": "healthy",
        "timestamp": datetime.datetime.now().isoformat(),
        "server": {
            "python_version": os.sys.version,
            "platform": os.sys.platform,
            "uptime": psutil.boot_time()
        },
        "memory": {
            "available": f"{psutil.virtual_memory().available / (1024**3):.2f} GB",
            "used": f"{psutil.virtual_memory().used / (1024**3):.2f} GB",
            "total": f"{psutil.virtual_memory().total / (1024**3):.2f} GB"
        }
    }

# Global exception handlers
@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.warning(f"{request.method} {request.url.path} rejected ({exc.status_code}): {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_response())

@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return await service_error_handler(request, InvalidInput("Invalid request body"))

# Startup event
@app.on_event("startup")
async def startup_event():
    logger.info(f"🎉 BAZINGA backend server is running on port {settings.PORT}")
    logger.info(f"🌐 CORS enabled for origins: {settings.CORS_ORIGINS}")
    if not settings.RAZORPAY_KEY_SECRET:
        logger.warning("RAZORPAY_KEY_SECRET is not set; every payment signature will be rejected")

# Shutdown event
@app.on_event("shutdown")
async def shutdown_event():
    logger.info("🛑 BAZINGA backend shutting down...")

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="127.0.0.1",
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level="info"
    )
