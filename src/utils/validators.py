"""Lightweight validation helpers for inbound webhook traffic."""

import hashlib
import hmac
from typing import Any, Optional

from utils.error_handling import MalformedEventError, SignatureVerificationError


def ensure_present(value: Any, field: str) -> None:
    """Raise MalformedEventError if value is falsy."""
    if value in (None, "", []):
        raise MalformedEventError(f"{field} is required")


def verify_signature(raw_body: bytes, signature_header: Optional[str], app_secret: str) -> None:
    """
    Check the ``X-Hub-Signature-256`` header against an HMAC of the raw body.

    The header has the form ``sha256=<hexdigest>``.
    """
    if not signature_header or not signature_header.startswith("sha256="):
        raise SignatureVerificationError("Missing signature header")

    expected = hmac.new(app_secret.encode(), raw_body, hashlib.sha256).hexdigest()
    received = signature_header.split("=", 1)[1]
    if not hmac.compare_digest(expected, received):
        raise SignatureVerificationError()
