"""
Pydantic model validation tests.

Ensures all models validate correctly and reject invalid data.
No AWS connection required.

Run with: pytest tests/unit/test_models.py -v
"""

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest
from pydantic import TypeAdapter, ValidationError

# Add src to path to simulate Lambda environment
SRC_PATH = Path(__file__).parent.parent.parent / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))


class TestCustomerSnapshot:
    """Test CustomerSnapshot defaults and helpers."""

    def test_new_snapshot_defaults(self):
        """A new customer starts at the beginning of both flows."""
        from models.customer import AddressPhase, CustomerSnapshot, RegistrationPhase

        snapshot = CustomerSnapshot.new("919800000001", "Asha")

        assert snapshot.display_name == "Asha"
        assert snapshot.registration_phase == RegistrationPhase.NOT_STARTED
        assert snapshot.address_phase == AddressPhase.NONE
        assert snapshot.loyalty_points == 0
        assert snapshot.last_interaction_at is None
        assert snapshot.version == 0

    def test_negative_points_rejected(self):
        """Loyalty points never go below zero."""
        from models.customer import CustomerSnapshot

        with pytest.raises(ValidationError):
            CustomerSnapshot(identifier="919800000001", loyalty_points=-1)

    def test_remembered_message_ids_are_bounded(self):
        """Only the most recent message ids are kept."""
        from models.customer import MAX_REMEMBERED_MESSAGE_IDS, CustomerSnapshot

        snapshot = CustomerSnapshot(identifier="919800000001")
        for index in range(MAX_REMEMBERED_MESSAGE_IDS + 5):
            snapshot.remember_message(f"wamid.{index}")

        assert len(snapshot.recent_message_ids) == MAX_REMEMBERED_MESSAGE_IDS
        assert snapshot.recent_message_ids[0] == "wamid.5"
        assert snapshot.has_seen_message("wamid.24")
        assert not snapshot.has_seen_message("wamid.0")
        assert not snapshot.has_seen_message(None)

    def test_json_round_trip_keeps_phases(self):
        """Stored JSON loads back into the same snapshot."""
        from models.customer import AddressDraft, AddressPhase, Coordinates, CustomerSnapshot

        snapshot = CustomerSnapshot(
            identifier="919800000001",
            address_phase=AddressPhase.AWAITING_DETAILS,
            address_draft=AddressDraft(coordinates=Coordinates(lat=18.9067, lng=72.8147)),
            last_interaction_at=datetime(2024, 5, 1, tzinfo=timezone.utc),
        )

        restored = CustomerSnapshot.model_validate_json(snapshot.model_dump_json())

        assert restored == snapshot
        assert '"awaiting_details"' in snapshot.model_dump_json()


class TestCoordinates:
    """Test coordinate bounds."""

    def test_valid(self):
        from models.customer import Coordinates

        assert Coordinates(lat=-90, lng=180).lat == -90

    @pytest.mark.parametrize("lat,lng", [(91, 0), (0, -181)])
    def test_out_of_range(self, lat, lng):
        from models.customer import Coordinates

        with pytest.raises(ValidationError):
            Coordinates(lat=lat, lng=lng)


class TestInboundMessage:
    """Test InboundMessage validation."""

    def test_identifier_is_trimmed(self):
        from models.events import InboundMessage, TextEvent

        message = InboundMessage(identifier=" 919800000001 ", event=TextEvent(body="hi"))
        assert message.identifier == "919800000001"

    def test_blank_identifier_rejected(self):
        from models.events import InboundMessage, TextEvent

        with pytest.raises(ValidationError):
            InboundMessage(identifier="  ", event=TextEvent(body="hi"))

    def test_event_discriminated_by_kind(self):
        from models.events import InboundMessage, LocationEvent

        message = InboundMessage.model_validate(
            {"identifier": "919800000001", "event": {"kind": "location", "lat": 19.0, "lng": 72.8}}
        )
        assert isinstance(message.event, LocationEvent)


class TestIntents:
    """Test outbound intent models."""

    def test_choice_prompt_allows_at_most_three_choices(self):
        from models.intents import Choice, ChoicePromptIntent

        choices = [Choice(id=str(i), title=str(i)) for i in range(4)]
        with pytest.raises(ValidationError):
            ChoicePromptIntent(text="pick", choices=choices)

    def test_choice_prompt_requires_a_choice(self):
        from models.intents import ChoicePromptIntent

        with pytest.raises(ValidationError):
            ChoicePromptIntent(text="pick", choices=[])

    def test_intent_union(self):
        from models.intents import Intent, LocationRequestIntent

        intent = TypeAdapter(Intent).validate_python({"kind": "location_request", "text": "pin please"})
        assert isinstance(intent, LocationRequestIntent)


class TestDeliveryModels:
    """Test zone and geocode models."""

    def test_zone_fee_cannot_be_negative(self):
        from models.delivery import ZoneRecord

        with pytest.raises(ValidationError):
            ZoneRecord(postal_code="400001", area="Fort", fee=-1, min_order=0, eta_label="")

    def test_unknown_location(self):
        from models.delivery import UNKNOWN_LOCATION, GeocodeResult

        assert UNKNOWN_LOCATION.is_unknown
        assert not GeocodeResult(city="Unknown", postal_code="400005").is_unknown
