"""
Conversation service.

One inbound message is one unit of work: lock the customer, load (or create)
the snapshot, run the engine, persist, then dispatch the composed intents.
Turns for the same identifier are serialized; different identifiers run in
parallel.
"""

from __future__ import annotations

import time
import uuid
from typing import Optional

from models.customer import CustomerSnapshot
from models.events import InboundMessage
from models.turn import TurnResult
from services.conversation_engine import ConversationEngine
from services.message_composer import MessageComposer
from utils.keyed_lock import KeyedLock
from utils.logging_config import get_logger

logger = get_logger(__name__)


class ConversationService:
    """Load -> handle -> save -> dispatch, under a per-customer lock."""

    def __init__(
        self,
        gateway,
        engine: ConversationEngine,
        transport=None,
        composer: Optional[MessageComposer] = None,
        locks: Optional[KeyedLock] = None,
    ) -> None:
        self.gateway = gateway
        self.engine = engine
        self.transport = transport
        self.composer = composer or MessageComposer()
        self.locks = locks or KeyedLock()

    def process(self, message: InboundMessage, correlation_id: Optional[str] = None) -> TurnResult:
        """
        Run one conversation turn.

        Storage errors propagate to the caller; in that case nothing has been
        dispatched and the previously stored snapshot is untouched.

        A profile name learned for a stored customer is saved even when the
        turn is a duplicate or ignored.
        """
        correlation_id = correlation_id or str(uuid.uuid4())
        start = time.perf_counter()

        with self.locks.hold(message.identifier):
            backfilled = False
            snapshot = self.gateway.load(message.identifier)
            if snapshot is None:
                snapshot = CustomerSnapshot.new(message.identifier, message.display_name)
            elif message.display_name and not snapshot.display_name:
                snapshot = snapshot.model_copy(update={"display_name": message.display_name})
                backfilled = True

            if snapshot.has_seen_message(message.message_id):
                logger.info(
                    "Duplicate delivery suppressed",
                    extra={"identifier": message.identifier, "message_id": message.message_id},
                )
                if backfilled:
                    self.gateway.save(snapshot)
                return self._result(message, "duplicate", start, correlation_id)

            updated, intents = self.engine.handle(snapshot, message.event)
            if not intents:
                if backfilled:
                    self.gateway.save(snapshot)
                return self._result(message, "ignored", start, correlation_id)

            updated.remember_message(message.message_id)
            self.gateway.save(updated)

            payloads = self.composer.compose_batch(intents)
            deliveries = []
            if self.transport is not None:
                deliveries = self.transport.deliver_batch(message.identifier, payloads)

        result = self._result(message, "handled", start, correlation_id)
        result.payloads = payloads
        result.deliveries = deliveries
        logger.info(
            "Turn handled",
            extra={
                "correlation_id": correlation_id,
                "identifier": message.identifier,
                "intent_count": len(intents),
                "failed_deliveries": sum(1 for d in deliveries if not d.ok),
                "latency_ms": result.latency_ms,
            },
        )
        return result

    @staticmethod
    def _result(message: InboundMessage, status: str, start: float, correlation_id: str) -> TurnResult:
        return TurnResult(
            identifier=message.identifier,
            message_id=message.message_id,
            status=status,
            latency_ms=int((time.perf_counter() - start) * 1000),
            correlation_id=correlation_id,
        )


def build_conversation_service(settings) -> ConversationService:
    """Wire the service from ``config.settings.Settings``."""
    from repositories.customer_state_repo import (
        DynamoDbCustomerStateGateway,
        InMemoryCustomerStateGateway,
    )
    from services.delivery_eligibility import DeliveryEligibility
    from services.geocoding_service import GeocodingService
    from services.whatsapp_transport import WhatsAppTransport
    from services.zone_catalog import SqlZoneCatalog, StaticZoneCatalog
    from utils.cache_service import LRUCache

    if settings.customers_table:
        gateway = DynamoDbCustomerStateGateway(settings.customers_table)
    else:
        logger.warning("CUSTOMERS_TABLE not set; customer state is kept in memory")
        gateway = InMemoryCustomerStateGateway()

    catalog = (
        SqlZoneCatalog.from_url(settings.zone_catalog_db_url)
        if settings.zone_catalog_db_url
        else StaticZoneCatalog()
    )
    geocoder = GeocodingService(
        api_key=settings.google_maps_api_key,
        timeout_seconds=settings.geocode_timeout_seconds,
        cache=LRUCache(max_size=settings.cache_max_size, ttl_seconds=settings.cache_ttl_seconds),
    )
    eligibility = DeliveryEligibility(
        catalog=catalog,
        geocoder=geocoder,
        origin_lat=settings.service_origin_lat,
        origin_lng=settings.service_origin_lng,
        radius_km=settings.delivery_radius_km,
        per_km_fee=settings.per_km_fee,
        radius_min_order=settings.radius_min_order,
    )
    engine = ConversationEngine(
        eligibility=eligibility,
        bonus_points=settings.registration_bonus_points,
        unserviceable_policy=settings.unserviceable_policy,
    )
    transport = WhatsAppTransport(
        phone_number_id=settings.whatsapp_phone_number_id,
        access_token=settings.whatsapp_access_token,
        api_version=settings.graph_api_version,
        timeout_seconds=settings.transport_timeout_seconds,
        pacing_seconds=settings.dispatch_pacing_seconds,
    )
    return ConversationService(gateway=gateway, engine=engine, transport=transport)
