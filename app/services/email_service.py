from fastapi import UploadFile
from fastapi_mail import FastMail, MessageSchema, ConnectionConfig, MessageType
from starlette.datastructures import Headers
from jinja2 import Environment, FileSystemLoader, select_autoescape
from typing import List, Optional
import io
import logging
import mimetypes
import os

from app.config import Settings
from app.errors import DeliveryFailure

logger = logging.getLogger(__name__)

APP_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
BASE_DIR = os.path.dirname(APP_DIR)
TEMPLATE_DIR = os.path.join(APP_DIR, "templates", "email")

env = Environment(
    loader=FileSystemLoader(TEMPLATE_DIR),
    autoescape=select_autoescape(["html"]),
)

OTP_SENDER_NAME = "BAZINGA! Verification"
COLLECTION_SENDER_NAME = "BAZINGA!"

OTP_SUBJECT = "🔐 Your BAZINGA! Verification Code"
COLLECTION_SUBJECT = "Here is your Big Bang Theory Image Collection! 🚀"


def attachment_filenames(prefix: str, count: int, extension: str) -> List[str]:
    """bazinga_01.jpg ... bazinga_11.jpg"""
    return [f"{prefix}{index:02d}{extension}" for index in range(1, count + 1)]


class EmailService:
    """SMTP delivery through fastapi-mail, one connection config per sender name."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def connection_config(self, sender_name: str) -> ConnectionConfig:
        use_ssl = self.settings.EMAIL_PORT == 465
        return ConnectionConfig(
            MAIL_USERNAME=self.settings.EMAIL_HOST_USER,
            MAIL_PASSWORD=self.settings.EMAIL_HOST_PASSWORD,
            MAIL_FROM=self.settings.sender_address,
            MAIL_FROM_NAME=sender_name,
            MAIL_PORT=self.settings.EMAIL_PORT,
            MAIL_SERVER=self.settings.EMAIL_HOST,
            MAIL_STARTTLS=not use_ssl,
            MAIL_SSL_TLS=use_ssl,
            USE_CREDENTIALS=True,
            VALIDATE_CERTS=True,
        )

    def attachment_paths(self) -> List[str]:
        directory = self.settings.ATTACHMENTS_DIR
        if not os.path.isabs(directory):
            directory = os.path.join(BASE_DIR, directory)
        names = attachment_filenames(
            self.settings.ATTACHMENT_PREFIX,
            self.settings.ATTACHMENT_COUNT,
            self.settings.ATTACHMENT_EXTENSION,
        )
        return [os.path.join(directory, name) for name in names]

    def load_attachments(self, paths: List[str]) -> List[UploadFile]:
        attachments = []
        for path in paths:
            with open(path, "rb") as f:
                data = f.read()
            content_type = mimetypes.guess_type(path)[0] or "application/octet-stream"
            attachments.append(UploadFile(
                file=io.BytesIO(data),
                filename=os.path.basename(path),
                headers=Headers({"content-type": content_type}),
            ))
        return attachments

    async def send(self, to_email: str, subject: str, template: str, context: dict, sender_name: str, label: str, attachments: Optional[List[str]] = None):
        """Render, build and send one HTML message. Any failure surfaces as DeliveryFailure; nothing is retried."""
        try:
            html = env.get_template(template).render(**context)
            message = MessageSchema(
                subject=subject,
                recipients=[to_email],
                body=html,
                subtype=MessageType.html,
                attachments=self.load_attachments(attachments or []),
            )
            fm = FastMail(self.connection_config(sender_name))
            await fm.send_message(message)
        except Exception as e:
            logger.error(f"Failed to send {label} email to {to_email}: {str(e)}")
            raise DeliveryFailure(f"Failed to send {label} email") from e
        logger.info(f"{label} email sent to {to_email}")

    # 🔑 OTP email
    async def send_otp_email(self, to_email: str, code: str, expires_in_minutes: int = 5):
        context = {"code": code, "expires_in_minutes": expires_in_minutes}
        await self.send(to_email, OTP_SUBJECT, "otp.html", context, OTP_SENDER_NAME, "OTP")

    # 🎁 Purchased collection
    async def send_collection_email(self, to_email: str) -> List[str]:
        paths = self.attachment_paths()
        await self.send(to_email, COLLECTION_SUBJECT, "collection.html", {}, COLLECTION_SENDER_NAME, "Image collection", attachments=paths)
        return [os.path.basename(path) for path in paths]
