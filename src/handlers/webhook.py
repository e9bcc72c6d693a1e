"""
WhatsApp webhook handler for GET and POST /webhook.

GET answers Meta's subscription handshake. POST verifies the payload
signature, normalizes the messages and runs one conversation turn per
message.
"""

from __future__ import annotations

import base64
import json
import uuid
from typing import Dict, Optional

from config.settings import Settings
from services.event_parser import parse_webhook
from utils.error_handling import SignatureVerificationError, StorageError, to_response
from utils.logging_config import get_logger
from utils.validators import verify_signature

logger = get_logger(__name__)

# Lazy-loaded to keep cold starts free of boto3/requests session setup.
_settings: Optional[Settings] = None
_conversation_service: Optional["ConversationService"] = None


def _get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings.from_environment()
    return _settings


def _get_conversation_service():
    """Lazy-load ConversationService."""
    global _conversation_service
    if _conversation_service is None:
        from services.conversation_service import build_conversation_service
        _conversation_service = build_conversation_service(_get_settings())
    return _conversation_service


def _json(status: int, body: Dict) -> Dict:
    return {
        "statusCode": status,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(body),
    }


def _raw_body(event) -> bytes:
    body = event.get("body") or ""
    if event.get("isBase64Encoded"):
        return base64.b64decode(body)
    return body.encode()


def verify_handler(event, context):
    """Handle GET /webhook (hub.challenge handshake)."""
    params = event.get("queryStringParameters") or {}
    expected = _get_settings().webhook_verify_token

    if (
        params.get("hub.mode") == "subscribe"
        and expected
        and params.get("hub.verify_token") == expected
    ):
        logger.info("Webhook verified")
        return {
            "statusCode": 200,
            "headers": {"Content-Type": "text/plain"},
            "body": params.get("hub.challenge", ""),
        }

    logger.warning("Webhook verification failed", extra={"mode": params.get("hub.mode")})
    return _json(403, {"message": "Verification failed"})


def lambda_handler(event, context):
    """Handle POST /webhook."""
    correlation_id = str(uuid.uuid4())
    raw_body = _raw_body(event)

    try:
        app_secret = _get_settings().whatsapp_app_secret
        if app_secret:
            headers = {k.lower(): v for k, v in (event.get("headers") or {}).items()}
            verify_signature(raw_body, headers.get("x-hub-signature-256"), app_secret)
        else:
            logger.warning("WHATSAPP_APP_SECRET not set; skipping signature check")

        payload = json.loads(raw_body or b"{}")
    except SignatureVerificationError as exc:
        logger.warning("Rejected webhook", extra={"correlation_id": correlation_id, "reason": str(exc)})
        return to_response(exc)
    except ValueError:
        logger.warning("Webhook body is not JSON", extra={"correlation_id": correlation_id})
        return _json(400, {"message": "Invalid JSON body", "correlation_id": correlation_id})

    messages = parse_webhook(payload) if isinstance(payload, dict) else []
    service = _get_conversation_service()

    processed = 0
    storage_failures = 0
    deferred = 0
    blocked = set()
    for message in messages:
        if message.identifier in blocked:
            # Later turns wait for the failed one so redelivery replays them in order.
            deferred += 1
            continue
        try:
            service.process(message, correlation_id=correlation_id)
            processed += 1
        except StorageError as exc:
            storage_failures += 1
            blocked.add(message.identifier)
            logger.error(
                "Turn failed on storage",
                extra={
                    "correlation_id": correlation_id,
                    "identifier": message.identifier,
                    "message_id": message.message_id,
                    "error": str(exc),
                },
            )

    if storage_failures:
        # Non-2xx makes the provider redeliver; processed messages are deduplicated by id.
        return _json(
            500,
            {
                "message": "Storage unavailable",
                "processed": processed,
                "failed": storage_failures,
                "deferred": deferred,
                "correlation_id": correlation_id,
            },
        )

    return _json(200, {"status": "ok", "processed": processed, "correlation_id": correlation_id})
