"""Pydantic models shared by the engine, services and handlers."""

from models.customer import (  # noqa: F401
    AddressDetails,
    AddressDraft,
    AddressPhase,
    Coordinates,
    CustomerSnapshot,
    RegistrationPhase,
    StructuredAddress,
)
from models.delivery import (  # noqa: F401
    UNKNOWN_LOCATION,
    DeliveryResult,
    EligibilityVerdict,
    GeocodeResult,
    ZoneRecord,
)
from models.events import (  # noqa: F401
    ButtonChoiceEvent,
    InboundEvent,
    InboundMessage,
    LocationEvent,
    TextEvent,
)
from models.intents import (  # noqa: F401
    Choice,
    ChoiceId,
    ChoicePromptIntent,
    Intent,
    ListPromptIntent,
    ListRow,
    ListSection,
    LocationRequestIntent,
    TextIntent,
)
from models.turn import TurnResult  # noqa: F401
