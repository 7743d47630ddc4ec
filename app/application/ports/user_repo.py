from typing import Protocol, Optional
from datetime import datetime

class UserDto:
    def __init__(self, id: int, email: str, nickname: str, phone_number: str,
                 password: str, deleted_at: Optional[datetime], created_at: datetime):
        self.id = id
        self.email = email
        self.nickname = nickname
        self.phone_number = phone_number
        self.password = password
        self.deleted_at = deleted_at
        self.created_at = created_at

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

class UserRepository(Protocol):
    def get_by_email(self, email: str) -> Optional[UserDto]:
        ...

    def get_by_id(self, user_id: int) -> Optional[UserDto]:
        ...

    def get_by_nickname(self, nickname: str) -> Optional[UserDto]:
        ...

    def get_by_phone(self, phone_number: str) -> Optional[UserDto]:
        ...

    def create(self, email: str, nickname: str, phone_number: str, password_hash: str) -> UserDto:
        ...

    def update_password(self, user_id: int, password_hash: str) -> None:
        ...

    def soft_delete(self, user_id: int) -> None:
        ...
