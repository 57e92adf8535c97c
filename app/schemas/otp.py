# app/schemas/otp.py

from pydantic import BaseModel
from typing import Optional, Union

class SendOtpRequest(BaseModel):
    email: Optional[str] = None

class VerifyOtpRequest(BaseModel):
    email: Optional[str] = None
    otp: Optional[Union[int, str]] = None

class OtpResponse(BaseModel):
    success: bool
    message: str
