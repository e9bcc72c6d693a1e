"""Customer conversation snapshot models."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from models.delivery import EligibilityVerdict


class RegistrationPhase(str, Enum):
    """Where the customer is in sign-up."""

    NOT_STARTED = "not_started"
    AWAITING_NAME = "awaiting_name"
    AWAITING_EMAIL_CHOICE = "awaiting_email_choice"
    AWAITING_EMAIL_TEXT = "awaiting_email_text"
    COMPLETE = "complete"


class AddressPhase(str, Enum):
    """Where the customer is in delivery-address collection."""

    NONE = "none"
    AWAITING_METHOD = "awaiting_method"
    AWAITING_LOCATION = "awaiting_location"
    AWAITING_FREE_TEXT = "awaiting_free_text"
    AWAITING_DETAILS = "awaiting_details"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    COMPLETE = "complete"


class Coordinates(BaseModel):
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)


class AddressDetails(BaseModel):
    """Fragments pulled out of the free-text details a customer adds to a pin."""

    building: Optional[str] = None
    floor: Optional[str] = None
    landmark: Optional[str] = None


class StructuredAddress(BaseModel):
    """Best-effort split of a typed address. Missing parts use sentinels."""

    street: str = ""
    city: str = "Unknown"
    pincode: str = ""


class AddressDraft(BaseModel):
    """Address being collected; replaced with an empty draft on every restart."""

    free_text: Optional[str] = None
    coordinates: Optional[Coordinates] = None
    detail_text: Optional[str] = None
    details: Optional[AddressDetails] = None
    eligibility: Optional[EligibilityVerdict] = None
    confirmed_summary: Optional[str] = None


MAX_REMEMBERED_MESSAGE_IDS = 20


class CustomerSnapshot(BaseModel):
    """Conversation state for one channel identifier (phone number)."""

    identifier: str
    display_name: Optional[str] = None
    loyalty_points: int = Field(default=0, ge=0)
    registration_phase: RegistrationPhase = RegistrationPhase.NOT_STARTED
    address_phase: AddressPhase = AddressPhase.NONE
    name: Optional[str] = None
    email: Optional[str] = None
    address_draft: AddressDraft = Field(default_factory=AddressDraft)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    last_interaction_at: Optional[datetime] = None
    version: int = 0
    recent_message_ids: List[str] = Field(default_factory=list)

    @classmethod
    def new(cls, identifier: str, display_name: Optional[str] = None) -> "CustomerSnapshot":
        """Fresh snapshot for an identifier seen for the first time."""
        return cls(identifier=identifier, display_name=display_name)

    def has_seen_message(self, message_id: Optional[str]) -> bool:
        return bool(message_id) and message_id in self.recent_message_ids

    def remember_message(self, message_id: Optional[str]) -> None:
        if not message_id or message_id in self.recent_message_ids:
            return
        self.recent_message_ids.append(message_id)
        del self.recent_message_ids[:-MAX_REMEMBERED_MESSAGE_IDS]
