"""
Message composer.

Maps engine intents to WhatsApp Cloud API message bodies. The envelope fields
(``messaging_product``, ``to``) are added by the transport.
"""

from __future__ import annotations

from typing import Any, Dict, List, Sequence

from models.intents import (
    ChoicePromptIntent,
    ListPromptIntent,
    LocationRequestIntent,
    TextIntent,
)

# Provider limits for interactive messages.
BUTTON_TITLE_LIMIT = 20
LIST_BUTTON_LIMIT = 20
ROW_TITLE_LIMIT = 24
ROW_DESCRIPTION_LIMIT = 72
SECTION_TITLE_LIMIT = 24
HEADER_LIMIT = 60
FOOTER_LIMIT = 60


def _clip(value: str, limit: int) -> str:
    return value if len(value) <= limit else value[: limit - 1] + "…"


class MessageComposer:
    """Stateless intent -> payload mapping."""

    def compose(self, intent) -> Dict[str, Any]:
        if isinstance(intent, TextIntent):
            return self._text(intent)
        if isinstance(intent, ChoicePromptIntent):
            return self._choice_prompt(intent)
        if isinstance(intent, ListPromptIntent):
            return self._list_prompt(intent)
        if isinstance(intent, LocationRequestIntent):
            return self._location_request(intent)
        raise TypeError(f"Unsupported intent: {type(intent).__name__}")

    def compose_batch(self, intents: Sequence) -> List[Dict[str, Any]]:
        return [self.compose(intent) for intent in intents]

    def _text(self, intent: TextIntent) -> Dict[str, Any]:
        return {"type": "text", "text": {"body": intent.text}}

    def _choice_prompt(self, intent: ChoicePromptIntent) -> Dict[str, Any]:
        interactive: Dict[str, Any] = {
            "type": "button",
            "body": {"text": intent.text},
            "action": {
                "buttons": [
                    {
                        "type": "reply",
                        "reply": {"id": choice.id, "title": _clip(choice.title, BUTTON_TITLE_LIMIT)},
                    }
                    for choice in intent.choices
                ]
            },
        }
        self._decorate(interactive, intent.header, intent.footer)
        return {"type": "interactive", "interactive": interactive}

    def _list_prompt(self, intent: ListPromptIntent) -> Dict[str, Any]:
        sections = []
        for section in intent.sections:
            rows = []
            for row in section.rows:
                rendered = {"id": row.id, "title": _clip(row.title, ROW_TITLE_LIMIT)}
                if row.description:
                    rendered["description"] = _clip(row.description, ROW_DESCRIPTION_LIMIT)
                rows.append(rendered)
            sections.append({"title": _clip(section.title, SECTION_TITLE_LIMIT), "rows": rows})

        interactive: Dict[str, Any] = {
            "type": "list",
            "body": {"text": intent.text},
            "action": {
                "button": _clip(intent.button_label, LIST_BUTTON_LIMIT),
                "sections": sections,
            },
        }
        self._decorate(interactive, intent.header, intent.footer)
        return {"type": "interactive", "interactive": interactive}

    def _location_request(self, intent: LocationRequestIntent) -> Dict[str, Any]:
        return {
            "type": "interactive",
            "interactive": {
                "type": "location_request_message",
                "body": {"text": intent.text},
                "action": {"name": "send_location"},
            },
        }

    @staticmethod
    def _decorate(interactive: Dict[str, Any], header, footer) -> None:
        if header:
            interactive["header"] = {"type": "text", "text": _clip(header, HEADER_LIMIT)}
        if footer:
            interactive["footer"] = {"text": _clip(footer, FOOTER_LIMIT)}
