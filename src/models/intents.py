"""Outbound intents produced by the conversation engine.

Intents are transport-agnostic; ``services.message_composer`` turns them into
WhatsApp payloads.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field


class ChoiceId(str, Enum):
    """Reply-button ids the engine sends and understands."""

    START_REGISTRATION = "start_registration"
    EMAIL_YES = "yes"
    EMAIL_SKIP = "skip"
    SHARE_LOCATION = "share_location"
    TYPE_ADDRESS = "type_address"
    CONFIRM = "confirm"
    CHANGE = "change"


class Choice(BaseModel):
    id: str
    title: str


class ListRow(BaseModel):
    id: str
    title: str
    description: Optional[str] = None


class ListSection(BaseModel):
    title: str
    rows: List[ListRow] = Field(min_length=1)


class TextIntent(BaseModel):
    kind: Literal["text"] = "text"
    text: str


class ChoicePromptIntent(BaseModel):
    """Body text with up to three reply buttons."""

    kind: Literal["choice_prompt"] = "choice_prompt"
    text: str
    choices: List[Choice] = Field(min_length=1, max_length=3)
    header: Optional[str] = None
    footer: Optional[str] = None

    @property
    def choice_ids(self) -> List[str]:
        return [choice.id for choice in self.choices]


class ListPromptIntent(BaseModel):
    """Body text with a button that opens a sectioned list."""

    kind: Literal["list_prompt"] = "list_prompt"
    text: str
    button_label: str
    sections: List[ListSection] = Field(min_length=1)
    header: Optional[str] = None
    footer: Optional[str] = None


class LocationRequestIntent(BaseModel):
    kind: Literal["location_request"] = "location_request"
    text: str


Intent = Annotated[
    Union[TextIntent, ChoicePromptIntent, ListPromptIntent, LocationRequestIntent],
    Field(discriminator="kind"),
]
