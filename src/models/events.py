"""Normalized inbound chat events."""

from __future__ import annotations

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator


class TextEvent(BaseModel):
    kind: Literal["text"] = "text"
    body: str


class ButtonChoiceEvent(BaseModel):
    """A tap on a reply button or a list row; ``id`` is the choice id we sent."""

    kind: Literal["button_choice"] = "button_choice"
    id: str


class LocationEvent(BaseModel):
    kind: Literal["location"] = "location"
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)


InboundEvent = Annotated[
    Union[TextEvent, ButtonChoiceEvent, LocationEvent],
    Field(discriminator="kind"),
]


class InboundMessage(BaseModel):
    """One chat event addressed to the engine, with who sent it."""

    identifier: str
    display_name: Optional[str] = None
    message_id: Optional[str] = None
    event: InboundEvent

    @field_validator("identifier")
    @classmethod
    def validate_identifier(cls, value: str) -> str:
        cleaned = (value or "").strip()
        if not cleaned:
            raise ValueError("identifier must be provided")
        return cleaned
