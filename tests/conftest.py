from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.dependencies import get_clock, get_email_service, get_gateway, get_otp_store, get_settings
from app.errors import DeliveryFailure, UpstreamFailure
from app.main import app
from app.services.email_service import attachment_filenames
from app.services.otp_service import OtpService
from app.services.otp_store import InMemoryOtpStore
from app.services.payment_service import PaymentService

TEST_SECRET = "s3cr3t"
TEST_KEY_ID = "rzp_test_key"

class FakeClock:
    def __init__(self, now=None):
        self.now = now or datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)

class FakeEmailService:
    def __init__(self):
        self.otp_emails = []
        self.collection_emails = []
        self.fail = False

    async def send_otp_email(self, to_email, code, expires_in_minutes=5):
        if self.fail:
            raise DeliveryFailure("Failed to send OTP email")
        self.otp_emails.append((to_email, code))

    async def send_collection_email(self, to_email):
        if self.fail:
            raise DeliveryFailure("Failed to send Image collection email")
        names = attachment_filenames("bazinga_", 11, ".jpg")
        self.collection_emails.append((to_email, names))
        return names

    def last_code(self, email):
        return [code for to, code in self.otp_emails if to == email][-1]

class FakeGateway:
    def __init__(self):
        self.calls = []
        self.fail = False

    async def create_order(self, amount, currency, receipt, notes):
        if self.fail:
            raise UpstreamFailure()
        self.calls.append({"amount": amount, "currency": currency, "receipt": receipt, "notes": notes})
        return {
            "id": f"order_{len(self.calls)}",
            "entity": "order",
            "amount": amount,
            "currency": currency,
            "receipt": receipt,
            "notes": notes,
            "status": "created",
        }

@pytest.fixture
def test_settings():
    return Settings(RAZORPAY_KEY_ID=TEST_KEY_ID, RAZORPAY_KEY_SECRET=TEST_SECRET)

@pytest.fixture
def store():
    return InMemoryOtpStore()

@pytest.fixture
def clock():
    return FakeClock()

@pytest.fixture
def mailer():
    return FakeEmailService()

@pytest.fixture
def gateway():
    return FakeGateway()

@pytest.fixture
def otp_service(store, mailer, clock):
    return OtpService(store, mailer, ttl=timedelta(minutes=5), clock=clock)

@pytest.fixture
def payment_service(test_settings, otp_service, gateway, mailer):
    return PaymentService(test_settings, otp_service, gateway, mailer)

@pytest.fixture
def client(test_settings, store, mailer, gateway, clock):
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_otp_store] = lambda: store
    app.dependency_overrides[get_email_service] = lambda: mailer
    app.dependency_overrides[get_gateway] = lambda: gateway
    app.dependency_overrides[get_clock] = lambda: clock
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
