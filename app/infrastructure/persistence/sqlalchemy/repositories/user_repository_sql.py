import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from .....db.models import User
from .....application.ports.user_repo import UserRepository, UserDto
from .....exceptions import ConflictError, ServiceUnavailableError

logger = logging.getLogger(__name__)


class SqlUserRepository(UserRepository):
    """Every database failure is logged here and surfaced as a generic 500."""

    def __init__(self, session: Session):
        self.session = session

    def _to_dto(self, user: User) -> UserDto:
        return UserDto(
            id=user.id,
            email=user.email,
            nickname=user.nickname,
            phone_number=user.phone_number,
            password=user.password,
            deleted_at=user.deleted_at,
            created_at=user.created_at,
        )

    def _first(self, statement) -> Optional[User]:
        try:
            return self.session.exec(statement).first()
        except SQLAlchemyError as e:
            logger.error(f"User lookup failed: {e}")
            raise ServiceUnavailableError()

    def _get(self, statement) -> Optional[UserDto]:
        user = self._first(statement)
        return self._to_dto(user) if user else None

    def get_by_email(self, email: str) -> Optional[UserDto]:
        return self._get(select(User).where(User.email == email))

    def get_by_id(self, user_id: int) -> Optional[UserDto]:
        return self._get(select(User).where(User.id == user_id))

    def get_by_nickname(self, nickname: str) -> Optional[UserDto]:
        return self._get(select(User).where(User.nickname == nickname))

    def get_by_phone(self, phone_number: str) -> Optional[UserDto]:
        return self._get(select(User).where(User.phone_number == phone_number))

    def create(self, email: str, nickname: str, phone_number: str, password_hash: str) -> UserDto:
        user = User(email=email, nickname=nickname, phone_number=phone_number, password=password_hash)
        try:
            self.session.add(user)
            self.session.commit()
            self.session.refresh(user)
        except IntegrityError as e:
            # a concurrent sign-up took the email, nickname or phone number first
            logger.warning(f"Duplicate user rejected: {e}")
            self.session.rollback()
            raise ConflictError("User already exists")
        except SQLAlchemyError as e:
            logger.error(f"Error creating user: {e}")
            self.session.rollback()
            raise ServiceUnavailableError()
        return self._to_dto(user)

    def update_password(self, user_id: int, password_hash: str) -> None:
        user = self._first(select(User).where(User.id == user_id))
        if not user:
            return
        user.password = password_hash
        self._save(user)

    def soft_delete(self, user_id: int) -> None:
        user = self._first(select(User).where(User.id == user_id))
        if not user or user.deleted_at is not None:
            return
        user.deleted_at = datetime.utcnow()
        self._save(user)

    def _save(self, user: User) -> None:
        user.updated_at = datetime.utcnow()
        try:
            self.session.add(user)
            self.session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Error updating user {user.id}: {e}")
            self.session.rollback()
            raise ServiceUnavailableError()
