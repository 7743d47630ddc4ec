from dataclasses import dataclass
from typing import Dict
import logging

from ..ports.user_repo import UserRepository
from .otp_service import OtpVerifier
from ...core.security import hash_password
from ...exceptions import ConflictError, UnauthorizedError

logger = logging.getLogger(__name__)

SIGNUP = "signup"
FIND_EMAIL = "email"
PASSWORD_RESET = "password"
VERIFICATION_KINDS = (SIGNUP, FIND_EMAIL, PASSWORD_RESET)


@dataclass
class UserService:
    user_repo: UserRepository
    otp: OtpVerifier

    # Soft-deleted accounts keep their email, nickname and phone number
    def confirm_email(self, email: str) -> None:
        if self.user_repo.get_by_email(email):
            raise ConflictError("Email already in use")

    def confirm_nickname(self, nickname: str) -> None:
        if self.user_repo.get_by_nickname(nickname):
            raise ConflictError("Nickname already in use")

    def confirm_phone_number(self, phone_number: str) -> None:
        if self.user_repo.get_by_phone(phone_number):
            raise ConflictError("Phone number already in use")
        self.otp.send_code(phone_number)

    def send_auth_number(self, phone_number: str) -> None:
        self.otp.send_code(phone_number)

    def confirm_auth_number(self, kind: str, phone_number: str, auth_number: str) -> None:
        self.otp.confirm_code(kind, phone_number, auth_number)

    def create_user(self, email: str, nickname: str, phone_number: str, password: str) -> Dict[str, int]:
        self.otp.require_verified(SIGNUP, phone_number)
        self.confirm_email(email)
        self.confirm_nickname(nickname)
        if self.user_repo.get_by_phone(phone_number):
            raise ConflictError("Phone number already in use")

        user = self.user_repo.create(email, nickname, phone_number, hash_password(password))
        self.otp.release(phone_number)
        logger.info(f"Created user {user.id}")
        return {"id": user.id}

    def find_email(self, phone_number: str) -> Dict[str, str]:
        self.otp.require_verified(FIND_EMAIL, phone_number)
        user = self.user_repo.get_by_phone(phone_number)
        if not user or user.is_deleted:
            raise UnauthorizedError()
        self.otp.release(phone_number)
        return {"email": user.email}

    def reset_password(self, email: str, phone_number: str, password: str) -> None:
        self.otp.require_verified(PASSWORD_RESET, phone_number)
        user = self.user_repo.get_by_email(email)
        if not user or user.is_deleted or user.phone_number != phone_number:
            raise UnauthorizedError()
        self.user_repo.update_password(user.id, hash_password(password))
        self.otp.release(phone_number)
        logger.info(f"Password reset for user {user.id}")

    def delete_user(self, user_id: int) -> None:
        self.user_repo.soft_delete(user_id)
        logger.info(f"Soft-deleted user {user_id}")
