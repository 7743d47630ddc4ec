from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
import logging

import jwt

logger = logging.getLogger(__name__)

ACCESS_SUBJECT = "access"
REFRESH_SUBJECT = "refresh"


@dataclass
class TokenService:
    """Signs and verifies the `{sub, id}` claims carried by every token.

    Access and refresh tokens share one secret, so `sub` is the only thing
    telling them apart and every verify call names the subject it expects.
    """

    secret_key: str
    algorithm: str = "HS256"
    access_expire_minutes: int = 5
    refresh_expire_days: Optional[int] = None

    def sign(self, claims: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
        to_encode = claims.copy()
        if expires_delta is not None:
            to_encode.update({"exp": datetime.now(timezone.utc) + expires_delta})
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def create_access_token(self, user_id: int) -> str:
        return self.sign(
            {"sub": ACCESS_SUBJECT, "id": user_id},
            timedelta(minutes=self.access_expire_minutes),
        )

    def create_refresh_token(self, user_id: int) -> str:
        expires = timedelta(days=self.refresh_expire_days) if self.refresh_expire_days else None
        return self.sign({"sub": REFRESH_SUBJECT, "id": user_id}, expires)

    def create_unscoped_token(self, user_id: int) -> str:
        return self.sign({"id": user_id})

    def decode(self, token: str) -> Optional[Dict[str, Any]]:
        """Verify signature and expiry. Returns None for any invalid token."""
        try:
            return jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            logger.info("Token has expired")
            return None
        except jwt.InvalidTokenError as e:
            logger.info(f"Invalid token: {e}")
            return None

    def verify(self, token: str, subject: Optional[str]) -> Optional[int]:
        """Return the user id of a valid token whose `sub` equals `subject`.

        `subject=None` accepts tokens without a `sub` claim (legacy tokens).
        """
        payload = self.decode(token)
        if payload is None:
            return None
        if payload.get("sub") != subject:
            return None
        user_id = payload.get("id")
        if not isinstance(user_id, int) or isinstance(user_id, bool):
            return None
        return user_id
