"""
Delivery eligibility.

Decides whether an address draft can be served and at what fee/ETA. Catalog
zones take precedence; a bare location pin falls back to a radius check around
the kitchen. The evaluation never raises: collaborator trouble degrades to a
"cannot verify" or radius answer.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from models.customer import AddressDraft, Coordinates
from models.delivery import EligibilityVerdict, ZoneRecord
from services.address_resolver import AddressResolver
from services.geocoding_service import GeocodingService
from services.zone_catalog import StaticZoneCatalog, ZoneCatalog
from utils.logging_config import get_logger

logger = get_logger(__name__)

EARTH_RADIUS_KM = 6371.0
ETA_PAD_MINUTES = 10

REASON_ZONE_UNAVAILABLE = "temporarily unavailable"
REASON_OUTSIDE_RADIUS = "outside delivery radius"
REASON_UNVERIFIABLE = "cannot verify address"


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance between two points in kilometres."""
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


@dataclass
class DeliveryEligibility:
    """Evaluates address drafts against the zone catalog and delivery radius."""

    catalog: ZoneCatalog = field(default_factory=StaticZoneCatalog)
    geocoder: GeocodingService = field(default_factory=GeocodingService)
    resolver: AddressResolver = field(default_factory=AddressResolver)
    origin_lat: float = 19.0760
    origin_lng: float = 72.8777
    radius_km: float = 5.0
    per_km_fee: int = 10
    radius_min_order: int = 200

    def evaluate(self, draft: AddressDraft) -> EligibilityVerdict:
        """Return the serviceability verdict for ``draft``."""
        postal_code = self._postal_code_from_text(draft)
        if postal_code:
            zone = self.catalog.lookup(postal_code)
            if zone:
                return self._from_zone(zone)

        if draft.coordinates:
            return self._from_coordinates(draft.coordinates)

        return EligibilityVerdict(serviceable=False, reason=REASON_UNVERIFIABLE)

    def _postal_code_from_text(self, draft: AddressDraft) -> str:
        if draft.free_text:
            pincode = self.resolver.parse_freeform(draft.free_text).pincode
            if pincode:
                return pincode
        return self.resolver.find_pincode(draft.detail_text)

    def _from_coordinates(self, coordinates: Coordinates) -> EligibilityVerdict:
        location = self.geocoder.reverse(coordinates.lat, coordinates.lng)
        if location.postal_code:
            zone = self.catalog.lookup(location.postal_code)
            if zone:
                return self._from_zone(zone)

        distance = haversine_km(self.origin_lat, self.origin_lng, coordinates.lat, coordinates.lng)
        logger.info(
            "Radius eligibility check",
            extra={"distance_km": round(distance, 2), "city": location.city},
        )
        if distance > self.radius_km:
            return EligibilityVerdict(
                serviceable=False,
                reason=REASON_OUTSIDE_RADIUS,
                distance_km=round(distance, 2),
            )

        fee = math.ceil(distance * self.per_km_fee)
        return EligibilityVerdict(
            serviceable=True,
            fee=fee,
            min_order=self.radius_min_order,
            eta_label=f"{fee}-{fee + ETA_PAD_MINUTES} mins",
            distance_km=round(distance, 2),
        )

    @staticmethod
    def _from_zone(zone: ZoneRecord) -> EligibilityVerdict:
        return EligibilityVerdict(
            serviceable=zone.serviceable,
            fee=zone.fee,
            min_order=zone.min_order,
            eta_label=zone.eta_label,
            reason=None if zone.serviceable else REASON_ZONE_UNAVAILABLE,
            area=zone.area,
        )


def format_verdict(verdict: EligibilityVerdict, currency: str = "₹") -> str:
    """Message block describing a verdict to the customer."""
    if not verdict.serviceable:
        return f"❌ Delivery not available: {verdict.reason or 'unknown reason'}"
    return (
        "✅ Delivery available to your location\n"
        f"🚚 Delivery charge: {currency}{verdict.fee}\n"
        f"📦 Minimum order: {currency}{verdict.min_order}\n"
        f"⏱️ Estimated time: {verdict.eta_label}"
    )
