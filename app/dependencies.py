from functools import lru_cache
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlmodel import Session

from .config import settings
from .database import get_session
from .exceptions import UnauthorizedError
from .application.ports.cache import VerificationCache
from .application.ports.sms_gateway import SmsGateway
from .application.ports.user_repo import UserDto, UserRepository
from .application.services.auth_service import AuthManager
from .application.services.otp_service import OtpVerifier
from .application.services.token_service import TokenService
from .application.services.user_service import UserService
from .infrastructure.audit.std_logger import StdAuditLogger
from .infrastructure.cache.memory_cache import InMemoryVerificationCache
from .infrastructure.persistence.sqlalchemy.repositories.user_repository_sql import SqlUserRepository
from .infrastructure.sms.sens_gateway import SensSmsGateway

bearer_scheme = HTTPBearer(auto_error=False)


@lru_cache()
def get_cache() -> VerificationCache:
    if settings.REDIS_URL:
        from .infrastructure.cache.redis_cache import RedisVerificationCache
        return RedisVerificationCache(settings.REDIS_URL)
    return InMemoryVerificationCache()


@lru_cache()
def get_sms_gateway() -> SmsGateway:
    return SensSmsGateway(
        access_key=settings.SENS_ACCESS_KEY,
        secret_key=settings.SENS_SECRET_KEY,
        service_id=settings.SENS_SERVICE_ID,
        sender_number=settings.SENS_SENDER_NUMBER,
        base_url=settings.SENS_BASE_URL,
        timeout=settings.SENS_TIMEOUT_SECONDS,
    )


@lru_cache()
def get_token_service() -> TokenService:
    return TokenService(
        secret_key=settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
        access_expire_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES,
        refresh_expire_days=settings.REFRESH_TOKEN_EXPIRE_DAYS,
    )


def get_user_repository(session: Session = Depends(get_session)) -> UserRepository:
    return SqlUserRepository(session)


def get_otp_verifier(
    cache: VerificationCache = Depends(get_cache),
    gateway: SmsGateway = Depends(get_sms_gateway),
) -> OtpVerifier:
    return OtpVerifier(
        cache=cache,
        gateway=gateway,
        code_ttl_seconds=settings.OTP_CODE_TTL_SECONDS,
        verified_ttl_seconds=settings.OTP_VERIFIED_TTL_SECONDS,
        message_template=settings.OTP_MESSAGE_TEMPLATE,
        audit=StdAuditLogger(),
    )


def get_auth_manager(
    user_repo: UserRepository = Depends(get_user_repository),
    tokens: TokenService = Depends(get_token_service),
) -> AuthManager:
    return AuthManager(
        user_repo=user_repo,
        tokens=tokens,
        legacy_tokens=settings.AUTH_LEGACY_TOKENS,
        audit=StdAuditLogger(),
    )


def get_user_service(
    user_repo: UserRepository = Depends(get_user_repository),
    otp: OtpVerifier = Depends(get_otp_verifier),
) -> UserService:
    return UserService(user_repo=user_repo, otp=otp)


def _bearer_token(credentials: Optional[HTTPAuthorizationCredentials]) -> str:
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError()
    return credentials.credentials


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    auth: AuthManager = Depends(get_auth_manager),
) -> UserDto:
    """Access-token guard for protected routes."""
    return auth.authenticate(_bearer_token(credentials))


def get_refresh_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    auth: AuthManager = Depends(get_auth_manager),
) -> int:
    """Refresh-token guard; the returned id is then handed to create_access_token."""
    return auth.verify_refresh_token(_bearer_token(credentials))
