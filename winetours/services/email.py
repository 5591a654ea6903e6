"""Outbound email via a Resend-compatible HTTP API"""

from typing import Any, Dict, List

import httpx
import structlog

from winetours.config import settings

logger = structlog.get_logger()


class EmailDeliveryError(Exception):
    """The email API rejected or failed to accept a message"""

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.status_code = status_code


class EmailDispatcher:
    """Posts one message per call to the configured email API"""

    def __init__(
        self,
        api_url: str = None,
        api_key: str = None,
        from_address: str = None,
        timeout: float = None,
        transport: httpx.AsyncBaseTransport = None,
    ):
        self.api_url = api_url or settings.email_api_url
        self.api_key = api_key if api_key is not None else settings.email_api_key
        self.from_address = from_address or settings.email_from_address
        self.timeout = timeout or settings.email_timeout_seconds
        self.transport = transport

    async def send(self, to: List[str], subject: str, html: str, text: str) -> Dict[str, Any]:
        if not self.api_key:
            raise EmailDeliveryError("Email API key not configured")

        payload = {
            "from": self.from_address,
            "to": to,
            "subject": subject,
            "html": html,
            "text": text,
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                resp = await client.post(
                    self.api_url,
                    json=payload,
                    headers={
                        "Authorization": f"Bearer {self.api_key}",
                        "Content-Type": "application/json",
                    },
                )
        except httpx.HTTPError as e:
            logger.error("Email request failed", error=str(e))
            raise EmailDeliveryError(f"Email request failed: {e}") from e

        if not resp.is_success:
            logger.error("Email API error", status_code=resp.status_code, body=resp.text[:300])
            raise EmailDeliveryError(f"Email API returned {resp.status_code}", resp.status_code)

        logger.info("Email sent", recipients=len(to), subject=subject)
        return resp.json() if resp.content else {}
