"""
Forwarding of property requests to the external scheduling system.

Requests are always stored locally first; forwarding is best-effort and a
failure only downgrades the response to "captured, will follow up".
"""

import logging
from datetime import datetime
from typing import Any, Optional

import httpx

from app.core.config import get_settings

logger = logging.getLogger(__name__)


class RequestForwarder:
    """Posts newly captured property requests to a webhook."""

    def __init__(self, url: Optional[str] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.url = url
        self.transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self.url)

    async def forward(self, payload: dict[str, Any], request_id: str) -> bool:
        """Send the request; True on a 2xx response."""
        if not self.url:
            return True

        body = {
            **payload,
            "requestId": request_id,
            "submittedAt": datetime.utcnow().isoformat() + "Z",
        }
        try:
            async with httpx.AsyncClient(transport=self.transport) as client:
                response = await client.post(self.url, json=body, timeout=10.0)
        except httpx.HTTPError as e:
            logger.warning(f"[REQUESTS] Forwarding error for {request_id}: {e}")
            return False

        if not response.is_success:
            logger.warning(
                f"[REQUESTS] Forwarding failed for {request_id}: {response.status_code} {response.reason_phrase}"
            )
            return False

        logger.info(f"[REQUESTS] Forwarded property request {request_id}")
        return True


def get_request_forwarder() -> RequestForwarder:
    return RequestForwarder(url=get_settings().property_request_url)
