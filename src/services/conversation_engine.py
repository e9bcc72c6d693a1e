"""
Conversation engine.

The state machine behind the chat front-end. Two sub-machines share one
customer snapshot: registration (name, optional email, bonus points) and
delivery-address collection (pin or typed address, details, eligibility,
confirmation). Address collection only starts once registration is complete.

``handle`` never mutates the snapshot it is given. An event that does not fit
the current phase returns the original snapshot and no intents, which is what
makes duplicate webhook deliveries harmless.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Tuple

from config.settings import OFFER_CONFIRM, FORCE_CHANGE
from models.customer import (
    AddressDraft,
    AddressPhase,
    Coordinates,
    CustomerSnapshot,
    RegistrationPhase,
)
from models.events import ButtonChoiceEvent, LocationEvent, TextEvent
from models.intents import ChoiceId
from services import conversation_prompts as prompts
from services.address_resolver import AddressResolver
from services.delivery_eligibility import DeliveryEligibility
from utils.logging_config import get_logger

logger = get_logger(__name__)


def _text(event) -> Optional[str]:
    """Stripped body of a text event, or None for any other kind."""
    if isinstance(event, TextEvent):
        return event.body.strip()
    return None


def _choice(event) -> Optional[str]:
    if isinstance(event, ButtonChoiceEvent):
        return event.id
    return None


class ConversationEngine:
    """Pure state transition: (snapshot, event) -> (snapshot, intents)."""

    def __init__(
        self,
        eligibility: Optional[DeliveryEligibility] = None,
        resolver: Optional[AddressResolver] = None,
        bonus_points: int = 100,
        unserviceable_policy: str = OFFER_CONFIRM,
    ) -> None:
        if unserviceable_policy not in (OFFER_CONFIRM, FORCE_CHANGE):
            raise ValueError(f"Unknown unserviceable policy: {unserviceable_policy}")
        self.eligibility = eligibility or DeliveryEligibility()
        self.resolver = resolver or AddressResolver()
        self.bonus_points = bonus_points
        self.unserviceable_policy = unserviceable_policy

        self._registration_steps: Dict[RegistrationPhase, Callable] = {
            RegistrationPhase.NOT_STARTED: self._on_not_started,
            RegistrationPhase.AWAITING_NAME: self._on_awaiting_name,
            RegistrationPhase.AWAITING_EMAIL_CHOICE: self._on_awaiting_email_choice,
            RegistrationPhase.AWAITING_EMAIL_TEXT: self._on_awaiting_email_text,
        }
        self._address_steps: Dict[AddressPhase, Callable] = {
            AddressPhase.NONE: self._on_address_none,
            AddressPhase.AWAITING_METHOD: self._on_awaiting_method,
            AddressPhase.AWAITING_LOCATION: self._on_awaiting_location,
            AddressPhase.AWAITING_FREE_TEXT: self._on_awaiting_free_text,
            AddressPhase.AWAITING_DETAILS: self._on_awaiting_details,
            AddressPhase.AWAITING_CONFIRMATION: self._on_awaiting_confirmation,
            AddressPhase.COMPLETE: self._on_address_complete,
        }

    def handle(
        self,
        snapshot: CustomerSnapshot,
        event,
        now: Optional[datetime] = None,
    ) -> Tuple[CustomerSnapshot, List]:
        """Advance the conversation by one inbound event."""
        working = snapshot.model_copy(deep=True)

        if working.registration_phase != RegistrationPhase.COMPLETE:
            step = self._registration_steps[working.registration_phase]
        else:
            step = self._address_steps[working.address_phase]

        intents = step(working, event)
        if not intents:
            logger.info(
                "Event ignored for current phase",
                extra={
                    "identifier": snapshot.identifier,
                    "event_kind": getattr(event, "kind", None),
                    "registration_phase": snapshot.registration_phase.value,
                    "address_phase": snapshot.address_phase.value,
                },
            )
            return snapshot, []

        working.last_interaction_at = now or datetime.now(timezone.utc)
        logger.info(
            "Conversation advanced",
            extra={
                "identifier": working.identifier,
                "registration_phase": working.registration_phase.value,
                "address_phase": working.address_phase.value,
                "intent_count": len(intents),
            },
        )
        return working, intents

    # Registration

    def _on_not_started(self, snapshot: CustomerSnapshot, event) -> List:
        first_contact = snapshot.last_interaction_at is None
        snapshot.registration_phase = RegistrationPhase.AWAITING_NAME
        if first_contact:
            return [prompts.welcome_offer(snapshot.display_name, self.bonus_points)]
        return [prompts.registration_offer(self.bonus_points)]

    def _on_awaiting_name(self, snapshot: CustomerSnapshot, event) -> List:
        if _choice(event) == ChoiceId.START_REGISTRATION.value:
            return [prompts.ask_name()]

        body = _text(event)
        if body is None:
            return []
        if not body:
            return [prompts.ask_name()]

        snapshot.name = body
        snapshot.registration_phase = RegistrationPhase.AWAITING_EMAIL_CHOICE
        return [prompts.email_opt_in(body)]

    def _on_awaiting_email_choice(self, snapshot: CustomerSnapshot, event) -> List:
        choice = _choice(event)
        if choice == ChoiceId.EMAIL_YES.value:
            snapshot.registration_phase = RegistrationPhase.AWAITING_EMAIL_TEXT
            return [prompts.ask_email()]
        if choice == ChoiceId.EMAIL_SKIP.value:
            return self._complete_registration(snapshot)
        return []

    def _on_awaiting_email_text(self, snapshot: CustomerSnapshot, event) -> List:
        body = _text(event)
        if body is None:
            return []
        if "@" in body:
            snapshot.email = body
            return self._complete_registration(snapshot)
        if body.lower() == "skip":
            return self._complete_registration(snapshot)
        return [prompts.invalid_email()]

    def _complete_registration(self, snapshot: CustomerSnapshot) -> List:
        snapshot.registration_phase = RegistrationPhase.COMPLETE
        snapshot.loyalty_points += self.bonus_points
        completion = prompts.registration_complete(
            snapshot.name, self.bonus_points, snapshot.loyalty_points
        )
        return [completion] + self._start_address_flow(snapshot)

    # Address collection

    def _start_address_flow(self, snapshot: CustomerSnapshot) -> List:
        snapshot.address_phase = AddressPhase.AWAITING_METHOD
        snapshot.address_draft = AddressDraft()
        return [prompts.address_method()]

    def _on_address_none(self, snapshot: CustomerSnapshot, event) -> List:
        return self._start_address_flow(snapshot)

    def _on_awaiting_method(self, snapshot: CustomerSnapshot, event) -> List:
        choice = _choice(event)
        if choice == ChoiceId.SHARE_LOCATION.value:
            snapshot.address_phase = AddressPhase.AWAITING_LOCATION
            return [prompts.request_location()]
        if choice == ChoiceId.TYPE_ADDRESS.value:
            snapshot.address_phase = AddressPhase.AWAITING_FREE_TEXT
            return [prompts.ask_typed_address()]
        return []

    def _on_awaiting_location(self, snapshot: CustomerSnapshot, event) -> List:
        if not isinstance(event, LocationEvent):
            return []
        snapshot.address_draft.coordinates = Coordinates(lat=event.lat, lng=event.lng)
        snapshot.address_phase = AddressPhase.AWAITING_DETAILS
        return [prompts.ask_location_details()]

    def _on_awaiting_free_text(self, snapshot: CustomerSnapshot, event) -> List:
        body = _text(event)
        if not body:
            return []
        snapshot.address_draft.free_text = body
        return self._confirm_address(snapshot)

    def _on_awaiting_details(self, snapshot: CustomerSnapshot, event) -> List:
        body = _text(event)
        if not body:
            return []
        snapshot.address_draft.detail_text = body
        snapshot.address_draft.details = self.resolver.extract_details(body)
        return self._confirm_address(snapshot)

    def _confirm_address(self, snapshot: CustomerSnapshot) -> List:
        draft = snapshot.address_draft
        verdict = self.eligibility.evaluate(draft)
        draft.eligibility = verdict
        snapshot.address_phase = AddressPhase.AWAITING_CONFIRMATION
        return [
            prompts.confirm_address(
                self.resolver.summarize_draft(draft),
                verdict,
                allow_confirm=self._confirm_allowed(draft),
            )
        ]

    def _confirm_allowed(self, draft: AddressDraft) -> bool:
        if self.unserviceable_policy == OFFER_CONFIRM:
            return True
        return draft.eligibility is not None and draft.eligibility.serviceable

    def _on_awaiting_confirmation(self, snapshot: CustomerSnapshot, event) -> List:
        choice = _choice(event)
        if choice == ChoiceId.CONFIRM.value:
            if not self._confirm_allowed(snapshot.address_draft):
                return []
            snapshot.address_draft.confirmed_summary = self.resolver.summarize_draft(
                snapshot.address_draft
            )
            snapshot.address_phase = AddressPhase.COMPLETE
            return [prompts.address_confirmed()]
        if choice == ChoiceId.CHANGE.value:
            return self._start_address_flow(snapshot)
        return []

    def _on_address_complete(self, snapshot: CustomerSnapshot, event) -> List:
        body = _text(event)
        if body is None:
            return []
        if body.lower() == "menu":
            return [prompts.menu_placeholder()]
        return [prompts.welcome_back(snapshot.name, snapshot.loyalty_points)]
