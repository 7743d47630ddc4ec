# app/core/security.py
from functools import lru_cache

from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Constant-time bcrypt comparison. A malformed stored hash never matches."""
    try:
        return pwd_context.verify(password, password_hash)
    except ValueError:
        return False


@lru_cache()
def _dummy_hash() -> str:
    return pwd_context.hash("unused-placeholder-password")


def verify_against_dummy(password: str) -> bool:
    """Spend one bcrypt round when there is no stored hash to check.

    Keeps sign-in timing the same whether or not the email is registered.
    """
    verify_password(password, _dummy_hash())
    return False
