"""
WhatsApp Cloud API transport.

Sends composed message bodies to a recipient. Delivery is fire-and-forget
from the conversation's point of view: failures are logged and reported in
the returned ``DeliveryResult``, never retried here.
"""

from __future__ import annotations

import time
from typing import Any, Dict, List, Optional, Sequence

import requests

from models.delivery import DeliveryResult
from utils.logging_config import get_logger

logger = get_logger(__name__)

GRAPH_BASE_URL = "https://graph.facebook.com"


class WhatsAppTransport:
    """Graph API ``/messages`` client."""

    def __init__(
        self,
        phone_number_id: str,
        access_token: str,
        api_version: str = "v20.0",
        timeout_seconds: float = 10.0,
        pacing_seconds: float = 0.0,
        session: Optional[requests.Session] = None,
        sleep=time.sleep,
    ):
        self.url = f"{GRAPH_BASE_URL}/{api_version}/{phone_number_id}/messages"
        self.access_token = access_token
        self.timeout_seconds = timeout_seconds
        self.pacing_seconds = pacing_seconds
        self.session = session or requests.Session()
        self._sleep = sleep

    @property
    def enabled(self) -> bool:
        return bool(self.access_token)

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.access_token}",
            "Content-Type": "application/json",
        }

    def deliver(self, identifier: str, payload: Dict[str, Any]) -> DeliveryResult:
        """Send one composed message to ``identifier``."""
        if not self.enabled:
            logger.info(
                "Transport disabled; message not sent",
                extra={"to": identifier, "type": payload.get("type")},
            )
            return DeliveryResult(ok=False, error="transport disabled")

        body = {
            "messaging_product": "whatsapp",
            "recipient_type": "individual",
            "to": identifier,
            **payload,
        }
        try:
            response = self.session.post(
                self.url, headers=self._headers(), json=body, timeout=self.timeout_seconds
            )
            data = response.json() if response.content else {}
        except (requests.RequestException, ValueError) as exc:
            logger.warning("WhatsApp send failed", extra={"to": identifier, "error": str(exc)})
            return DeliveryResult(ok=False, error=str(exc))

        if not response.ok:
            error = data.get("error", {}).get("message") or f"HTTP {response.status_code}"
            logger.warning(
                "WhatsApp API rejected message",
                extra={"to": identifier, "status": response.status_code, "error": error},
            )
            return DeliveryResult(ok=False, error=error)

        messages = data.get("messages") or [{}]
        return DeliveryResult(ok=True, message_id=messages[0].get("id"))

    def deliver_batch(self, identifier: str, payloads: Sequence[Dict[str, Any]]) -> List[DeliveryResult]:
        """Send payloads in order, pausing ``pacing_seconds`` between sends."""
        results = []
        for index, payload in enumerate(payloads):
            if index and self.pacing_seconds > 0:
                self._sleep(self.pacing_seconds)
            results.append(self.deliver(identifier, payload))
        return results
