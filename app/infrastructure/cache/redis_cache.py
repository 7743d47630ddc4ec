import logging
from typing import Optional

import redis

from ...application.ports.cache import VerificationCache
from ...exceptions import ServiceUnavailableError

logger = logging.getLogger(__name__)


class RedisVerificationCache(VerificationCache):
    def __init__(self, url: str, prefix: str = "otp:") -> None:
        self.client = redis.Redis.from_url(url, decode_responses=True)
        self.prefix = prefix

    def get(self, key: str) -> Optional[str]:
        try:
            return self.client.get(f"{self.prefix}{key}")
        except redis.RedisError as e:
            logger.error(f"Redis GET failed: {e}")
            raise ServiceUnavailableError()

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        try:
            self.client.set(f"{self.prefix}{key}", value, ex=ttl_seconds)
        except redis.RedisError as e:
            logger.error(f"Redis SET failed: {e}")
            raise ServiceUnavailableError()

    def delete(self, key: str) -> None:
        try:
            self.client.delete(f"{self.prefix}{key}")
        except redis.RedisError as e:
            logger.error(f"Redis DEL failed: {e}")
            raise ServiceUnavailableError()
