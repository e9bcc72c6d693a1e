"""Delivery-zone, geocoding and dispatch models."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class ZoneRecord(BaseModel):
    """One row of the delivery-zone catalog, keyed by postal code."""

    postal_code: str
    area: str
    fee: int = Field(ge=0)
    min_order: int = Field(ge=0)
    eta_label: str
    serviceable: bool = True


class GeocodeResult(BaseModel):
    """Administrative area for a coordinate pair."""

    city: str
    postal_code: str
    state: Optional[str] = None
    country: Optional[str] = None
    formatted_address: Optional[str] = None

    @property
    def is_unknown(self) -> bool:
        return self.city == "Unknown" and not self.postal_code


UNKNOWN_LOCATION = GeocodeResult(city="Unknown", postal_code="", state="Unknown")


class EligibilityVerdict(BaseModel):
    """Serviceability answer shown to the customer before address confirmation."""

    serviceable: bool
    fee: int = 0
    min_order: int = 0
    eta_label: str = ""
    reason: Optional[str] = None
    area: Optional[str] = None
    distance_km: Optional[float] = None


class DeliveryResult(BaseModel):
    """Outcome of a single outbound send."""

    ok: bool
    message_id: Optional[str] = None
    error: Optional[str] = None
