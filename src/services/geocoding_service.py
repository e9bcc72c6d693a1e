"""
Reverse geocoding service.

Wraps the Google Geocoding API. Every failure path (no key, timeout, HTTP
error, empty result) resolves to ``UNKNOWN_LOCATION`` so a slow or broken
oracle never blocks a conversation turn.
"""

from __future__ import annotations

from typing import Optional

import requests

from models.delivery import UNKNOWN_LOCATION, GeocodeResult
from utils.cache_service import LRUCache
from utils.logging_config import get_logger

logger = get_logger(__name__)

GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"


class GeocodingService:
    """Coordinates -> city and postal code, cached and time-bounded."""

    def __init__(
        self,
        api_key: str = "",
        timeout_seconds: float = 3.0,
        cache: Optional[LRUCache] = None,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key
        self.timeout_seconds = timeout_seconds
        self.cache = cache or LRUCache(max_size=256, ttl_seconds=3600)
        self.session = session or requests.Session()

    def reverse(self, lat: float, lng: float) -> GeocodeResult:
        """Best-effort reverse lookup; never raises."""
        if not self.api_key:
            return UNKNOWN_LOCATION

        # ~11 m grid; pins dropped on the same building share an entry.
        cache_key = (round(lat, 4), round(lng, 4))
        cached = self.cache.get(cache_key)
        if cached:
            return cached

        try:
            response = self.session.get(
                GEOCODE_URL,
                params={"latlng": f"{lat},{lng}", "key": self.api_key},
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
            result = self._parse_response(response.json())
        except (requests.RequestException, ValueError) as exc:
            logger.warning(
                "Reverse geocoding failed; using unknown location",
                extra={"lat": lat, "lng": lng, "error": str(exc)},
            )
            return UNKNOWN_LOCATION

        if not result.is_unknown:
            self.cache.set(cache_key, result)
        return result

    def _parse_response(self, payload: dict) -> GeocodeResult:
        """Pick locality, postal code, state and country out of the first result."""
        if payload.get("status") != "OK" or not payload.get("results"):
            logger.info("Geocoder returned no result", extra={"status": payload.get("status")})
            return UNKNOWN_LOCATION

        first = payload["results"][0]
        fields = {"city": "", "postal_code": "", "state": None, "country": None}
        for component in first.get("address_components", []):
            types = component.get("types", [])
            if "locality" in types:
                fields["city"] = component.get("long_name", "")
            if "postal_code" in types:
                fields["postal_code"] = component.get("long_name", "")
            if "administrative_area_level_1" in types:
                fields["state"] = component.get("long_name")
            if "country" in types:
                fields["country"] = component.get("long_name")

        return GeocodeResult(
            city=fields["city"] or "Unknown",
            postal_code=fields["postal_code"],
            state=fields["state"],
            country=fields["country"],
            formatted_address=first.get("formatted_address"),
        )
