import re
from typing import Optional

import pytest

from app.application.ports.sms_gateway import SmsDeliveryError
from app.application.services import otp_service
from app.application.services.otp_service import OtpVerifier, generate_code
from app.exceptions import UnauthorizedError, ServiceUnavailableError


class FakeCache:
    def __init__(self):
        self.store = {}
        self.ttls = {}

    def get(self, key: str) -> Optional[str]:
        return self.store.get(key)

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        self.store[key] = value
        self.ttls[key] = ttl_seconds

    def delete(self, key: str) -> None:
        self.store.pop(key, None)


class FakeGateway:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent = []

    def send(self, phone_number: str, content: str) -> None:
        if self.fail:
            raise SmsDeliveryError("gateway down")
        self.sent.append((phone_number, content))


class FakeAudit:
    def __init__(self):
        self.entries = []

    def log(self, action, phone=None, user_id=None, success=True, details=None):
        self.entries.append((action, phone, success))


PHONE = "010-1234-5678"


def make_verifier(gateway=None, audit=None):
    return OtpVerifier(cache=FakeCache(), gateway=gateway or FakeGateway(), code_ttl_seconds=180, verified_ttl_seconds=1800, audit=audit)


def test_generate_code_is_six_digits():
    for _ in range(200):
        assert re.fullmatch(r"[0-9]{6}", generate_code())


def test_generate_code_zero_pads(monkeypatch):
    monkeypatch.setattr(otp_service.secrets, "randbelow", lambda n: 42)
    assert generate_code() == "000042"


def test_send_code_caches_code_and_sends_it():
    verifier = make_verifier()
    verifier.send_code(PHONE)
    code = verifier.cache.store[PHONE]
    assert verifier.cache.ttls[PHONE] == 180
    (to, content), = verifier.gateway.sent
    assert to == PHONE
    assert code in content


def test_send_code_replaces_pending_code(monkeypatch):
    codes = iter([111111, 222222])
    monkeypatch.setattr(otp_service.secrets, "randbelow", lambda n: next(codes))
    verifier = make_verifier()
    verifier.send_code(PHONE)
    verifier.send_code(PHONE)
    assert verifier.cache.store[PHONE] == "222222"
    with pytest.raises(UnauthorizedError):
        verifier.confirm_code("signup", PHONE, "111111")


def test_send_code_gateway_failure_is_unavailable_and_not_cached():
    audit = FakeAudit()
    verifier = make_verifier(gateway=FakeGateway(fail=True), audit=audit)
    with pytest.raises(ServiceUnavailableError):
        verifier.send_code(PHONE)
    assert PHONE not in verifier.cache.store
    assert audit.entries == [("otp_send", PHONE, False)]


def test_confirm_code_succeeds_exactly_once():
    verifier = make_verifier()
    verifier.send_code(PHONE)
    code = verifier.cache.store[PHONE]

    verifier.confirm_code("signup", PHONE, code)
    assert verifier.cache.store[PHONE] == "signup"
    assert verifier.cache.ttls[PHONE] == 1800

    with pytest.raises(UnauthorizedError):
        verifier.confirm_code("signup", PHONE, code)


def test_confirm_without_send_and_wrong_code_fail_identically():
    verifier = make_verifier()
    with pytest.raises(UnauthorizedError) as never_sent:
        verifier.confirm_code("signup", PHONE, "123456")

    verifier.cache.set(PHONE, "123456", 180)
    with pytest.raises(UnauthorizedError) as wrong:
        verifier.confirm_code("signup", PHONE, "654321")

    assert never_sent.value.status_code == wrong.value.status_code == 401
    assert never_sent.value.detail == wrong.value.detail


def test_confirm_code_with_non_ascii_digits_is_unauthorized():
    verifier = make_verifier()
    verifier.cache.set(PHONE, "123456", 180)
    with pytest.raises(UnauthorizedError):
        verifier.confirm_code("signup", PHONE, "١٢٣٤٥٦")
    assert verifier.cache.store[PHONE] == "123456"


def test_end_to_end_phone_verification():
    verifier = make_verifier()
    verifier.cache.set(PHONE, "123456", 180)

    with pytest.raises(UnauthorizedError):
        verifier.confirm_code("signup", PHONE, "654321")
    assert verifier.cache.store == {PHONE: "123456"}

    verifier.confirm_code("signup", PHONE, "123456")
    assert verifier.cache.store == {PHONE: "signup"}


def test_require_verified_checks_kind():
    verifier = make_verifier()
    verifier.cache.set(PHONE, "email", 1800)
    verifier.require_verified("email", PHONE)
    with pytest.raises(UnauthorizedError):
        verifier.require_verified("signup", PHONE)
    verifier.release(PHONE)
    assert not verifier.is_verified("email", PHONE)
