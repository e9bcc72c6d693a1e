"""
Webhook payload parser.

Flattens a WhatsApp Cloud API webhook body (entry -> changes -> value ->
messages) into ``InboundMessage`` records. Anything the engine cannot act on
(status callbacks, media, missing sender, unparseable location) is dropped
with a log line rather than surfaced to the channel.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, List, Optional

from pydantic import ValidationError as PydanticValidationError

from models.events import (
    ButtonChoiceEvent,
    InboundMessage,
    LocationEvent,
    TextEvent,
)
from utils.error_handling import MalformedEventError
from utils.logging_config import get_logger
from utils.validators import ensure_present

logger = get_logger(__name__)


def _dicts(items: Any, level: str) -> Iterator[Dict[str, Any]]:
    """Yield the dict elements of a payload list, logging anything else."""
    if not isinstance(items, list):
        if items is not None:
            logger.warning("Dropping malformed webhook list", extra={"level": level, "type": type(items).__name__})
        return
    for item in items:
        if isinstance(item, dict):
            yield item
        else:
            logger.warning("Dropping malformed webhook element", extra={"level": level, "type": type(item).__name__})


def _iter_values(payload: Dict[str, Any]) -> Iterator[Dict[str, Any]]:
    for entry in _dicts(payload.get("entry"), "entry"):
        for change in _dicts(entry.get("changes"), "change"):
            value = change.get("value")
            if isinstance(value, dict):
                yield value


def _display_names(value: Dict[str, Any]) -> Dict[str, str]:
    names = {}
    for contact in _dicts(value.get("contacts"), "contact"):
        wa_id = contact.get("wa_id")
        profile = contact.get("profile")
        name = profile.get("name") if isinstance(profile, dict) else None
        if isinstance(wa_id, str) and wa_id and name:
            names[wa_id] = name
    return names


def _section(container: Dict[str, Any], key: str) -> Dict[str, Any]:
    section = container.get(key)
    return section if isinstance(section, dict) else {}


def _to_event(message: Dict[str, Any]):
    message_type = message.get("type")

    if message_type == "text":
        body = _section(message, "text").get("body")
        ensure_present(body, "text.body")
        return TextEvent(body=body)

    if message_type == "interactive":
        interactive = _section(message, "interactive")
        reply = _section(interactive, "button_reply") or _section(interactive, "list_reply")
        ensure_present(reply.get("id"), "interactive reply id")
        return ButtonChoiceEvent(id=reply["id"])

    if message_type == "button":
        # Quick-reply buttons on template messages carry a payload, not an id.
        button = _section(message, "button")
        ensure_present(button.get("payload"), "button.payload")
        return ButtonChoiceEvent(id=button["payload"])

    if message_type == "location":
        location = _section(message, "location")
        try:
            return LocationEvent(lat=float(location["latitude"]), lng=float(location["longitude"]))
        except (KeyError, TypeError, ValueError, PydanticValidationError) as exc:
            raise MalformedEventError("location is missing or out of range") from exc

    raise MalformedEventError(f"unsupported message type: {message_type}")


def parse_webhook(payload: Dict[str, Any]) -> List[InboundMessage]:
    """Return every actionable message in the payload, in delivery order."""
    messages: List[InboundMessage] = []
    for value in _iter_values(payload):
        names = _display_names(value)
        for raw in _dicts(value.get("messages"), "message"):
            parsed = parse_message(raw, names)
            if parsed:
                messages.append(parsed)
    return messages


def parse_message(raw: Dict[str, Any], display_names: Optional[Dict[str, str]] = None) -> Optional[InboundMessage]:
    """Normalize one provider message; None if it is malformed or unsupported."""
    sender = raw.get("from")
    try:
        ensure_present(sender, "from")
        if not isinstance(sender, str):
            raise MalformedEventError("from must be a string")
        return InboundMessage(
            identifier=sender,
            display_name=(display_names or {}).get(sender),
            message_id=raw.get("id"),
            event=_to_event(raw),
        )
    except (MalformedEventError, PydanticValidationError) as exc:
        logger.warning(
            "Dropping malformed inbound message",
            extra={"message_id": raw.get("id"), "type": raw.get("type"), "reason": str(exc)},
        )
        return None
