#config.py
import os
from pydantic_settings import BaseSettings
from pydantic import Field
from pydantic_settings import SettingsConfigDict
from typing import Optional, List
from functools import lru_cache

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore", populate_by_name=True)

    # Application Settings
    APP_NAME: str = "SMIL Accounts API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    DOCS_ENABLED: bool = True

    # Server Settings
    HOST: str = "0.0.0.0"
    PORT: int = int(os.environ.get("PORT", 8000))

    # Database Settings
    DATABASE_URL: str = "sqlite:///./accounts.db"

    # Token Settings
    SECRET_KEY: str = Field(default="change-me-in-prod", alias="JWT_SECRET_KEY")
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 5
    # 0 or None issues refresh tokens without an exp claim
    REFRESH_TOKEN_EXPIRE_DAYS: Optional[int] = 14
    AUTH_LEGACY_TOKENS: bool = False

    # OTP Settings
    OTP_CODE_TTL_SECONDS: int = 180
    OTP_VERIFIED_TTL_SECONDS: int = 1800
    OTP_MESSAGE_TEMPLATE: str = "[SMIL] 인증번호: {code}\n인증번호를 입력해 주세요."

    # NAVER Cloud SENS Settings
    SENS_BASE_URL: str = "https://sens.apigw.ntruss.com"
    SENS_ACCESS_KEY: str = ""
    SENS_SECRET_KEY: str = ""
    SENS_SERVICE_ID: str = ""
    SENS_SENDER_NUMBER: str = ""
    SENS_TIMEOUT_SECONDS: float = 10.0

    # Cache Settings
    REDIS_URL: Optional[str] = None

    # CORS Settings (comma-separated)
    ALLOWED_ORIGINS: str = "*"

    # Logging Settings
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    def _split_csv(self, value: str) -> List[str]:
        if value is None:
            return []
        value = value.strip()
        if value == "":
            return []
        return [item.strip() for item in value.split(",")]

    @property
    def allowed_origins_list(self) -> List[str]:
        return self._split_csv(self.ALLOWED_ORIGINS)

@lru_cache()
def get_settings() -> Settings:
    return Settings()

settings: Settings = get_settings()
