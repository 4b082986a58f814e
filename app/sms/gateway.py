"""NCloud SENS SMS gateway client"""

import base64
import hashlib
import hmac
import re
import time
from typing import Any, Optional

import httpx
import structlog
from pydantic import BaseModel

from app.config import Settings
from app.models.sms import SCHEDULE_LABELS, ScheduleType
from app.sms.exceptions import GatewayFailure
from app.sms.notifier import TelegramNotifier

logger = structlog.get_logger()

SHORT_MESSAGE_MAX_LENGTH = 90
DEV_MODE_REQUEST_ID = "dev-mode"


class SmsResult(BaseModel):
    """Outcome of one send"""
    success: bool
    request_id: Optional[str] = None
    message_type: Optional[str] = None
    error: Optional[str] = None
    response: Optional[Any] = None


def normalize_phone(phone: str) -> str:
    """Digits only"""
    return re.sub(r"\D", "", phone or "")


def message_type_for(content: str) -> str:
    """Bodies longer than 90 characters go out as LMS"""
    return "LMS" if len(content) > SHORT_MESSAGE_MAX_LENGTH else "SMS"


def make_signature(method: str, path: str, timestamp: str, access_key: str, secret_key: str) -> str:
    """SENS v2 signature: base64(HMAC-SHA256(secret, "METHOD path\\ntimestamp\\naccessKey"))"""
    # Method and path are joined by a space, not a newline; SENS rejects anything else
    message = f"{method} {path}\n{timestamp}\n{access_key}"
    digest = hmac.new(secret_key.encode("utf-8"), message.encode("utf-8"), hashlib.sha256).digest()
    return base64.b64encode(digest).decode("utf-8")


class SensSmsClient:
    """
    Sends single messages through NCloud SENS.

    Without credentials the client runs in development mode and reports
    success without touching the network. send() never raises.
    """

    def __init__(
        self,
        settings: Settings,
        notifier: Optional[TelegramNotifier] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.access_key = settings.ncloud_access_key
        self.secret_key = settings.ncloud_secret_key
        self.service_id = settings.ncloud_service_id
        self.calling_number = settings.ncloud_calling_number
        self.base_url = settings.sens_base_url.rstrip("/")
        self.timeout = settings.sms_request_timeout_seconds
        self.notifier = notifier
        self._client = http_client

    @property
    def configured(self) -> bool:
        return all([self.access_key, self.secret_key, self.service_id, self.calling_number])

    @property
    def path(self) -> str:
        return f"/sms/v2/services/{self.service_id}/messages"

    def build_request(self, to: str, content: str, timestamp: Optional[str] = None) -> tuple:
        """Headers and JSON body for one message"""
        timestamp = timestamp or str(int(time.time() * 1000))
        headers = {
            "Content-Type": "application/json; charset=utf-8",
            "x-ncp-apigw-timestamp": timestamp,
            "x-ncp-iam-access-key": self.access_key,
            "x-ncp-apigw-signature-v2": make_signature(
                "POST", self.path, timestamp, self.access_key, self.secret_key
            ),
        }
        body = {
            "type": message_type_for(content),
            "from": self.calling_number,
            "content": content,
            "messages": [{"to": normalize_phone(to)}],
        }
        return headers, body

    async def send(
        self,
        to: str,
        content: str,
        company_name: Optional[str] = None,
        schedule_type: Optional[str] = None,
    ) -> SmsResult:
        message_type = message_type_for(content)

        if not self.configured:
            logger.info("SMS gateway not configured, development mode", to=to)
            return SmsResult(success=True, request_id=DEV_MODE_REQUEST_ID, message_type=message_type)

        headers, body = self.build_request(to, content)

        try:
            data = await self._post(headers, body)
        except GatewayFailure as e:
            logger.error("SMS send failed", to=to, error=str(e), response=e.response)
            return SmsResult(
                success=False,
                message_type=message_type,
                error=str(e),
                response=e.response,
            )

        request_id = data["requestId"]
        logger.info("SMS sent", to=to, request_id=request_id, message_type=message_type)
        await self._notify_sent(to, message_type, company_name, schedule_type)

        return SmsResult(success=True, request_id=request_id, message_type=message_type, response=data)

    async def _post(self, headers: dict, body: dict) -> dict:
        """POST one message; raises GatewayFailure for anything but an accepted request"""
        url = f"{self.base_url}{self.path}"
        try:
            if self._client is not None:
                response = await self._client.post(url, headers=headers, json=body, timeout=self.timeout)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(url, headers=headers, json=body)
        except httpx.HTTPError as e:
            raise GatewayFailure(f"SMS gateway request failed: {e.__class__.__name__}") from e

        try:
            data = response.json()
        except ValueError:
            data = {"raw": response.text}

        if not response.is_success:
            error = data.get("error") if isinstance(data, dict) else None
            raise GatewayFailure(
                str(error or f"SMS gateway returned {response.status_code}"),
                response=data,
            )

        if not isinstance(data, dict) or not data.get("requestId"):
            raise GatewayFailure("SMS gateway response missing requestId", response=data)

        return data

    async def _notify_sent(self, to, message_type, company_name, schedule_type):
        if self.notifier is None:
            return
        try:
            label = ""
            if schedule_type:
                try:
                    label = SCHEDULE_LABELS[ScheduleType(schedule_type)]
                except ValueError:
                    label = str(schedule_type)
            text = (
                "✅ <b>SMS 발송 완료</b>\n\n"
                f"수신자: {company_name or to}\n"
                f"연락처: {to}\n"
                + (f"유형: {label}\n" if label else "")
                + f"발송유형: {message_type}"
            )
            await self.notifier.send(text)
        except Exception as e:
            logger.warning("Send notification failed", error=str(e))
