import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from app.errors import DeliveryFailure, Expired, InvalidInput, Mismatch, NoSessionFound, NotVerified
from app.models.otp_session import OtpSession
from app.services import otp_service as otp_service_module
from app.services.otp_service import OtpService
from app.utils.otp import generate_otp, is_otp_expired, is_valid_email, normalize_code

EMAIL = "a@b.com"


def issue(otp_service, email=EMAIL):
    asyncio.run(otp_service.issue(email))


# -------------------- HELPERS --------------------
@pytest.mark.parametrize("email", ["a@b.com", "first.last@sub.example.org", "UPPER@Case.IO"])
def test_valid_emails(email):
    assert is_valid_email(email)


@pytest.mark.parametrize("email", [None, "", "plainaddress", "a@b", "a b@c.com", "a@@b.com", "@b.com"])
def test_invalid_emails(email):
    assert not is_valid_email(email)


def test_generated_codes_are_six_digits_without_leading_zero():
    for _ in range(500):
        code = generate_otp()
        assert len(code) == 6 and code.isdigit()
        assert 100000 <= int(code) <= 999999


def test_expiry_boundary():
    issued = datetime(2024, 1, 1, tzinfo=timezone.utc)
    ttl = timedelta(minutes=5)
    assert not is_otp_expired(issued, issued + ttl, ttl)
    assert is_otp_expired(issued, issued + ttl + timedelta(seconds=1), ttl)


def test_normalize_code():
    assert normalize_code(123456) == "123456"
    assert normalize_code(" 123456 ") == "123456"
    assert normalize_code("") is None
    assert normalize_code(None) is None


# -------------------- ISSUE --------------------
def test_issue_stores_unverified_session_and_emails_code(otp_service, store, mailer, clock):
    issue(otp_service)

    session = store.get(EMAIL)
    assert session.verified is False
    assert session.issued_at == clock.now
    assert mailer.otp_emails == [(EMAIL, session.code)]


def test_issue_rejects_bad_email(otp_service, store, mailer):
    with pytest.raises(InvalidInput):
        issue(otp_service, "not-an-email")
    with pytest.raises(InvalidInput):
        issue(otp_service, None)
    assert len(store) == 0
    assert mailer.otp_emails == []


def test_issue_delivery_failure_discards_session(otp_service, store, mailer):
    mailer.fail = True
    with pytest.raises(DeliveryFailure) as exc:
        issue(otp_service)
    assert EMAIL not in store
    assert isinstance(exc.value.__cause__, DeliveryFailure)


class SlowFailingFirstMailer:
    """First send stalls and then fails; later sends go through at once."""

    def __init__(self):
        self.calls = 0
        self.delivered = []

    async def send_otp_email(self, to_email, code, expires_in_minutes=5):
        self.calls += 1
        if self.calls == 1:
            await asyncio.sleep(0.05)
            raise DeliveryFailure("smtp timeout")
        self.delivered.append((to_email, code))


def test_failed_send_keeps_newer_session(store, clock):
    mailer = SlowFailingFirstMailer()
    service = OtpService(store, mailer, ttl=timedelta(minutes=5), clock=clock)

    async def overlapping_issues():
        return await asyncio.gather(service.issue(EMAIL), service.issue(EMAIL), return_exceptions=True)

    results = asyncio.run(overlapping_issues())

    assert isinstance(results[0], DeliveryFailure)
    assert results[1] is None
    (to, delivered_code), = mailer.delivered
    assert store.get(EMAIL).code == delivered_code
    assert service.verify(EMAIL, delivered_code).verified


def test_delete_if_current_only_removes_same_session(store, clock):
    first = OtpSession(email=EMAIL, code="111111", issued_at=clock.now)
    second = OtpSession(email=EMAIL, code="111111", issued_at=clock.now)
    store.set(EMAIL, second)

    assert store.delete_if_current(EMAIL, first) is False
    assert store.get(EMAIL) is second
    assert store.delete_if_current(EMAIL, second) is True
    assert EMAIL not in store


def test_reissue_resets_verified_and_invalidates_old_code(otp_service, store, mailer, clock, monkeypatch):
    codes = iter(["111111", "222222"])
    monkeypatch.setattr(otp_service_module, "generate_otp", lambda: next(codes))

    issue(otp_service)
    otp_service.verify(EMAIL, "111111")
    assert store.get(EMAIL).verified is True

    clock.advance(seconds=30)
    issue(otp_service)
    new_session = store.get(EMAIL)
    assert new_session.code == "222222"
    assert new_session.verified is False
    assert new_session.issued_at == clock.now

    with pytest.raises(Mismatch):
        otp_service.verify(EMAIL, "111111")
    assert otp_service.verify(EMAIL, "222222").verified


# -------------------- VERIFY --------------------
def test_verify_correct_code(otp_service, store, mailer):
    issue(otp_service)
    session = otp_service.verify(EMAIL, mailer.last_code(EMAIL))

    assert session.verified is True
    stored = store.get(EMAIL)
    assert stored.verified is True
    assert stored.code == mailer.last_code(EMAIL)


def test_verify_accepts_numeric_code(otp_service, mailer):
    issue(otp_service)
    assert otp_service.verify(EMAIL, int(mailer.last_code(EMAIL))).verified


def test_verify_without_session(otp_service):
    with pytest.raises(NoSessionFound):
        otp_service.verify(EMAIL, "123456")


@pytest.mark.parametrize("email, otp", [(None, "123456"), ("", "123456"), (EMAIL, None), (EMAIL, "")])
def test_verify_missing_fields(otp_service, email, otp):
    with pytest.raises(InvalidInput):
        otp_service.verify(email, otp)


def test_verify_expired_deletes_session(otp_service, store, mailer, clock):
    issue(otp_service)
    code = mailer.last_code(EMAIL)
    clock.advance(minutes=5, seconds=1)

    with pytest.raises(Expired):
        otp_service.verify(EMAIL, code)
    assert EMAIL not in store

    with pytest.raises(NoSessionFound):
        otp_service.verify(EMAIL, code)


def test_verify_at_exactly_five_minutes_still_valid(otp_service, mailer, clock):
    issue(otp_service)
    clock.advance(minutes=5)
    assert otp_service.verify(EMAIL, mailer.last_code(EMAIL)).verified


def test_mismatch_keeps_session_for_retry(otp_service, store, mailer):
    issue(otp_service)
    before = store.get(EMAIL)
    wrong = "000000"

    with pytest.raises(Mismatch):
        otp_service.verify(EMAIL, wrong)
    assert store.get(EMAIL) == before

    assert otp_service.verify(EMAIL, mailer.last_code(EMAIL)).verified


def test_emails_are_case_sensitive_keys(otp_service, mailer):
    issue(otp_service)
    with pytest.raises(NoSessionFound):
        otp_service.verify("A@B.com", mailer.last_code(EMAIL))


# -------------------- GATE --------------------
def test_require_verified(otp_service, mailer):
    with pytest.raises(NotVerified):
        otp_service.require_verified(EMAIL)

    issue(otp_service)
    with pytest.raises(NotVerified):
        otp_service.require_verified(EMAIL)

    otp_service.verify(EMAIL, mailer.last_code(EMAIL))
    assert otp_service.require_verified(EMAIL).verified
