from datetime import datetime
from typing import Optional

import pytest

from app.application.ports.user_repo import UserDto
from app.application.services.otp_service import OtpVerifier
from app.application.services.user_service import UserService
from app.core.security import verify_password
from app.exceptions import ConflictError, UnauthorizedError
from app.infrastructure.cache.memory_cache import InMemoryVerificationCache


class FakeUsers:
    def __init__(self):
        self.users = {}
        self.next_id = 1

    def _find(self, **kwargs) -> Optional[UserDto]:
        for u in self.users.values():
            if all(getattr(u, k) == v for k, v in kwargs.items()):
                return u
        return None

    def get_by_email(self, email):
        return self._find(email=email)

    def get_by_id(self, user_id):
        return self.users.get(user_id)

    def get_by_nickname(self, nickname):
        return self._find(nickname=nickname)

    def get_by_phone(self, phone_number):
        return self._find(phone_number=phone_number)

    def create(self, email, nickname, phone_number, password_hash):
        user = UserDto(id=self.next_id, email=email, nickname=nickname, phone_number=phone_number,
                       password=password_hash, deleted_at=None, created_at=datetime.utcnow())
        self.users[user.id] = user
        self.next_id += 1
        return user

    def update_password(self, user_id, password_hash):
        self.users[user_id].password = password_hash

    def soft_delete(self, user_id):
        self.users[user_id].deleted_at = datetime.utcnow()


class FakeGateway:
    def __init__(self):
        self.sent = []

    def send(self, phone_number, content):
        self.sent.append(phone_number)


PHONE = "010-1234-5678"


@pytest.fixture
def svc():
    otp = OtpVerifier(cache=InMemoryVerificationCache(), gateway=FakeGateway())
    return UserService(user_repo=FakeUsers(), otp=otp)


def verify_phone(svc, kind, phone=PHONE):
    svc.otp.cache.set(phone, kind, 60)


def test_sign_up_flow(svc):
    svc.confirm_email("alice@example.com")
    svc.confirm_nickname("alice")
    svc.confirm_phone_number(PHONE)
    assert svc.otp.gateway.sent == [PHONE]

    code = svc.otp.cache.get(PHONE)
    svc.confirm_auth_number("signup", PHONE, code)
    result = svc.create_user("alice@example.com", "alice", PHONE, "password123")

    assert result == {"id": 1}
    stored = svc.user_repo.get_by_id(1)
    assert stored.password != "password123"
    assert verify_password("password123", stored.password)
    assert svc.otp.cache.get(PHONE) is None


def test_sign_up_requires_verified_phone(svc):
    with pytest.raises(UnauthorizedError):
        svc.create_user("alice@example.com", "alice", PHONE, "password123")

    verify_phone(svc, "password")
    with pytest.raises(UnauthorizedError):
        svc.create_user("alice@example.com", "alice", PHONE, "password123")


def test_duplicates_are_conflicts(svc):
    verify_phone(svc, "signup")
    svc.create_user("alice@example.com", "alice", PHONE, "password123")
    svc.user_repo.soft_delete(1)

    with pytest.raises(ConflictError):
        svc.confirm_email("alice@example.com")
    with pytest.raises(ConflictError):
        svc.confirm_nickname("alice")
    with pytest.raises(ConflictError):
        svc.confirm_phone_number(PHONE)
    assert svc.otp.gateway.sent == []

    verify_phone(svc, "signup", "010-9999-8888")
    with pytest.raises(ConflictError):
        svc.create_user("alice@example.com", "other", "010-9999-8888", "password123")


def test_find_email(svc):
    verify_phone(svc, "signup")
    svc.create_user("alice@example.com", "alice", PHONE, "password123")

    with pytest.raises(UnauthorizedError):
        svc.find_email(PHONE)

    verify_phone(svc, "email")
    assert svc.find_email(PHONE) == {"email": "alice@example.com"}
    with pytest.raises(UnauthorizedError):
        svc.find_email(PHONE)


def test_reset_password(svc):
    verify_phone(svc, "signup")
    svc.create_user("alice@example.com", "alice", PHONE, "password123")

    verify_phone(svc, "password", "010-9999-8888")
    with pytest.raises(UnauthorizedError):
        svc.reset_password("alice@example.com", "010-9999-8888", "newpass456")

    verify_phone(svc, "password")
    svc.reset_password("alice@example.com", PHONE, "newpass456")
    assert verify_password("newpass456", svc.user_repo.get_by_id(1).password)
    assert svc.otp.cache.get(PHONE) is None


def test_delete_user_soft_deletes(svc):
    verify_phone(svc, "signup")
    svc.create_user("alice@example.com", "alice", PHONE, "password123")
    svc.delete_user(1)
    assert svc.user_repo.get_by_id(1).is_deleted

    verify_phone(svc, "email")
    with pytest.raises(UnauthorizedError):
        svc.find_email(PHONE)
