from pydantic_settings import BaseSettings
from pydantic import Field
from typing import List
import os

class Settings(BaseSettings):
    # === PAYMENT GATEWAY ===
    RAZORPAY_KEY_ID: str = Field(default=os.environ.get("RAZORPAY_KEY_ID", ""), description="Razorpay public key id")
    RAZORPAY_KEY_SECRET: str = Field(default=os.environ.get("RAZORPAY_KEY_SECRET", ""), description="Razorpay secret, also the HMAC key for payment callbacks")
    RAZORPAY_API_URL: str = Field(default="https://api.razorpay.com/v1", description="Razorpay REST base URL")

    # === EMAIL ===
    EMAIL_HOST: str = Field(default=os.environ.get("EMAIL_HOST", "smtp.gmail.com"), description="SMTP host")
    EMAIL_PORT: int = Field(default=int(os.environ.get("EMAIL_PORT", 587)), description="SMTP port (587 STARTTLS, 465 SSL)")
    EMAIL_HOST_USER: str = Field(default=os.environ.get("EMAIL_HOST_USER", os.environ.get("EMAIL_USER", "")), description="SMTP username")
    EMAIL_HOST_PASSWORD: str = Field(default=os.environ.get("EMAIL_HOST_PASSWORD", os.environ.get("EMAIL_PASS", "")), description="SMTP password")
    EMAIL_FROM: str = Field(default=os.environ.get("EMAIL_FROM", ""), description="Sender address, defaults to EMAIL_HOST_USER")

    # === OTP ===
    OTP_EXPIRE_MINUTES: int = Field(default=5, description="Minutes before an issued OTP expires")

    # === ORDER ===
    ORDER_AMOUNT: int = Field(default=150, description="Order amount in minor units (paise)")
    ORDER_CURRENCY: str = Field(default="INR", description="Order currency code")

    # === DELIVERABLES ===
    ATTACHMENTS_DIR: str = Field(default="files", description="Directory holding the image collection")
    ATTACHMENT_PREFIX: str = Field(default="bazinga_")
    ATTACHMENT_EXTENSION: str = Field(default=".jpg")
    ATTACHMENT_COUNT: int = Field(default=11)

    # === SERVER ===
    CORS_ORIGINS: List[str] = Field(default=["*"], description="Allowed CORS origins")
    PORT: int = Field(default=int(os.environ.get("PORT", 4000)), description="HTTP port")

    # === DEBUG MODE ===
    DEBUG: bool = Field(default=os.environ.get("DEBUG", "False").lower() == "true", description="Debug mode")

    @property
    def sender_address(self) -> str:
        return self.EMAIL_FROM or self.EMAIL_HOST_USER

    class Config:
        env_file = ".env"
        case_sensitive = False

# Create settings instance
settings = Settings()
