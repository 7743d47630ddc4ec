from typing import Optional, Dict
from dataclasses import dataclass
import logging

from ..ports.user_repo import UserRepository, UserDto
from ..ports.audit_logger import AuditLogger
from .token_service import TokenService, ACCESS_SUBJECT, REFRESH_SUBJECT
from ...core.security import verify_password, verify_against_dummy
from ...exceptions import UnauthorizedError

logger = logging.getLogger(__name__)


@dataclass
class TokenPair:
    access_token: str
    refresh_token: Optional[str] = None

    def to_dict(self) -> Dict[str, str]:
        data = {"accessToken": self.access_token}
        if self.refresh_token is not None:
            data["refreshToken"] = self.refresh_token
        return data


@dataclass
class AuthManager:
    """Password sign-in and token issuance.

    With ``legacy_tokens`` the manager reproduces the earlier single-token
    behaviour at sign-in: no soft-delete check, one token carrying only ``id``
    with no subject and no expiry. The guard then accepts only such tokens,
    and still refuses deleted accounts.
    """

    user_repo: UserRepository
    tokens: TokenService
    legacy_tokens: bool = False
    audit: Optional[AuditLogger] = None

    def sign_in(self, email: str, password: str) -> TokenPair:
        user = self.user_repo.get_by_email(email)
        if user is None:
            verified = verify_against_dummy(password)
        else:
            verified = verify_password(password, user.password)
        # legacy sign-in only checked that the account exists
        active = user is not None and (self.legacy_tokens or not user.is_deleted)
        if not active or not verified:
            self._audit("sign_in", success=False)
            raise UnauthorizedError()

        self._audit("sign_in", user_id=user.id)
        if self.legacy_tokens:
            return TokenPair(access_token=self.tokens.create_unscoped_token(user.id))
        return TokenPair(
            access_token=self.tokens.create_access_token(user.id),
            refresh_token=self.tokens.create_refresh_token(user.id),
        )

    def create_access_token(self, user_id: int) -> TokenPair:
        user = self.user_repo.get_by_id(user_id)
        if not self._is_active(user):
            raise UnauthorizedError()
        return TokenPair(access_token=self.tokens.create_access_token(user.id))

    def authenticate(self, token: str) -> UserDto:
        """Resolve a bearer access token to its user."""
        subject = None if self.legacy_tokens else ACCESS_SUBJECT
        user_id = self.tokens.verify(token, subject)
        if user_id is None:
            raise UnauthorizedError()
        user = self.user_repo.get_by_id(user_id)
        if not self._is_active(user):
            raise UnauthorizedError()
        return user

    def verify_refresh_token(self, token: str) -> int:
        user_id = self.tokens.verify(token, REFRESH_SUBJECT)
        if user_id is None:
            raise UnauthorizedError()
        return user_id

    def _is_active(self, user: Optional[UserDto]) -> bool:
        return user is not None and not user.is_deleted

    def _audit(self, action: str, user_id: Optional[int] = None, success: bool = True) -> None:
        if self.audit is not None:
            self.audit.log(action, user_id=user_id, success=success)
