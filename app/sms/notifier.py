"""Telegram operational notifications"""

from typing import Optional

import httpx
import structlog

from app.config import Settings

logger = structlog.get_logger()


class TelegramNotifier:
    """
    Best-effort operator channel.

    Disabled when the bot token or chat id is not configured. Never raises:
    delivery problems are logged and reported as False.
    """

    def __init__(self, settings: Settings, http_client: Optional[httpx.AsyncClient] = None):
        self.bot_token = settings.telegram_bot_token
        self.chat_id = settings.telegram_chat_id
        self.api_url = settings.telegram_api_url.rstrip("/")
        self.timeout = settings.sms_request_timeout_seconds
        self._client = http_client

    @property
    def enabled(self) -> bool:
        return bool(self.bot_token and self.chat_id)

    async def send(self, text: str) -> bool:
        if not self.enabled:
            return False

        payload = {
            "chat_id": self.chat_id,
            "text": text,
            "parse_mode": "HTML",
        }
        url = f"{self.api_url}/bot{self.bot_token}/sendMessage"

        try:
            if self._client is not None:
                response = await self._client.post(url, json=payload, timeout=self.timeout)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(url, json=payload)
            response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning("Telegram notification failed", error=str(e))
            return False

        return True
