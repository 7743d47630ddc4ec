import hashlib
import json
import logging
from datetime import datetime, timezone
from typing import Optional, Dict, Any

from ...application.ports.audit_logger import AuditLogger


def hash_phone_number(phone: str) -> str:
    """One-way hash so raw phone numbers never reach the logs."""
    return hashlib.sha256(phone.encode()).hexdigest()


class StdAuditLogger(AuditLogger):
    def __init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def log(self, action: str, phone: Optional[str] = None, user_id: Optional[int] = None, success: bool = True, details: Optional[Dict[str, Any]] = None) -> None:
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "action": action,
            "phone_hash": hash_phone_number(phone) if phone else None,
            "user_id": user_id,
            "success": success,
            "details": details or {},
        }
        self._logger.info(f"AUDIT: {json.dumps(entry, ensure_ascii=False)}")
