from dataclasses import dataclass
from typing import Optional
import logging
import secrets

from ..ports.cache import VerificationCache
from ..ports.sms_gateway import SmsGateway, SmsDeliveryError
from ..ports.audit_logger import AuditLogger
from ...exceptions import UnauthorizedError, ServiceUnavailableError

logger = logging.getLogger(__name__)

CODE_LENGTH = 6
DEFAULT_MESSAGE_TEMPLATE = "[SMIL] 인증번호: {code}\n인증번호를 입력해 주세요."


def generate_code() -> str:
    """Uniform 6-digit code in 000000-999999, left zero-padded."""
    return f"{secrets.randbelow(10 ** CODE_LENGTH):0{CODE_LENGTH}d}"


@dataclass
class OtpVerifier:
    """Phone ownership check through a one-time SMS code.

    The cache entry for a phone number holds the pending code until it is
    confirmed, then the verification kind (``signup``, ``email``,
    ``password``) that later registration and recovery steps look for.

    Confirmation reads, deletes and rewrites the entry without an atomic
    compare-and-delete, so two concurrent confirms with the right code can
    both succeed. Registration re-checks uniqueness, which covers it.
    """

    cache: VerificationCache
    gateway: SmsGateway
    code_ttl_seconds: int = 180
    verified_ttl_seconds: int = 1800
    message_template: str = DEFAULT_MESSAGE_TEMPLATE
    audit: Optional[AuditLogger] = None

    def send_code(self, phone_number: str) -> None:
        code = generate_code()
        content = self.message_template.format(code=code)
        try:
            self.gateway.send(phone_number, content)
        except SmsDeliveryError as e:
            logger.error(f"Failed to deliver verification code: {e}")
            self._audit("otp_send", phone_number, success=False)
            raise ServiceUnavailableError()
        self.cache.set(phone_number, code, self.code_ttl_seconds)
        self._audit("otp_send", phone_number)

    def confirm_code(self, kind: str, phone_number: str, submitted_code: str) -> None:
        cached = self.cache.get(phone_number)
        if cached is None or not secrets.compare_digest(cached.encode("utf-8"), submitted_code.encode("utf-8")):
            self._audit("otp_confirm", phone_number, success=False, details={"kind": kind})
            raise UnauthorizedError()
        self.cache.delete(phone_number)
        self.cache.set(phone_number, kind, self.verified_ttl_seconds)
        self._audit("otp_confirm", phone_number, details={"kind": kind})

    def is_verified(self, kind: str, phone_number: str) -> bool:
        return self.cache.get(phone_number) == kind

    def require_verified(self, kind: str, phone_number: str) -> None:
        if not self.is_verified(kind, phone_number):
            raise UnauthorizedError()

    def release(self, phone_number: str) -> None:
        """Drop the verified marker once the step it unlocked has completed."""
        self.cache.delete(phone_number)

    def _audit(self, action: str, phone_number: str, success: bool = True, details: Optional[dict] = None) -> None:
        if self.audit is not None:
            self.audit.log(action, phone=phone_number, success=success, details=details)
