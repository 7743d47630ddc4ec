import base64
import hashlib
import hmac
import logging
import time
from typing import Dict, Optional

import requests

from ...application.ports.sms_gateway import SmsGateway, SmsDeliveryError

logger = logging.getLogger(__name__)


def make_signature(method: str, path: str, timestamp: str, access_key: str, secret_key: str) -> str:
    """NAVER Cloud API gateway v2 signature.

    base64(HMAC-SHA256(secret_key, "<method> <path>\\n<timestamp>\\n<access_key>"))
    """
    message = f"{method} {path}\n{timestamp}\n{access_key}"
    digest = hmac.new(secret_key.encode("utf-8"), message.encode("utf-8"), hashlib.sha256).digest()
    return base64.b64encode(digest).decode("utf-8")


class SensSmsGateway(SmsGateway):
    """Sends SMS through NAVER Cloud SENS."""

    def __init__(self, access_key: str, secret_key: str, service_id: str, sender_number: str,
                 base_url: str = "https://sens.apigw.ntruss.com", timeout: float = 10.0,
                 session: Optional[requests.Session] = None):
        self.access_key = access_key
        self.secret_key = secret_key
        self.service_id = service_id
        self.sender_number = sender_number
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def path(self) -> str:
        return f"/sms/v2/services/{self.service_id}/messages"

    def build_headers(self, timestamp: str) -> Dict[str, str]:
        return {
            "Content-Type": "application/json; charset=utf-8",
            "x-ncp-apigw-timestamp": timestamp,
            "x-ncp-iam-access-key": self.access_key,
            "x-ncp-apigw-signature-v2": make_signature("POST", self.path, timestamp, self.access_key, self.secret_key),
        }

    def send(self, phone_number: str, content: str) -> None:
        if not self.service_id or not self.access_key or not self.secret_key:
            raise SmsDeliveryError("SENS credentials not configured")

        timestamp = str(int(time.time() * 1000))
        body = {
            "type": "SMS",
            "from": self.sender_number,
            "content": content,
            "messages": [{"to": phone_number}],
        }
        try:
            response = self.session.post(
                f"{self.base_url}{self.path}",
                json=body,
                headers=self.build_headers(timestamp),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise SmsDeliveryError(f"SENS request failed: {e}") from e

        if not response.ok:
            raise SmsDeliveryError(f"SENS responded {response.status_code}: {response.text}")
        logger.info(f"SENS accepted message, status {response.status_code}")
