"""
Address resolver.

Turns what customers type into structured address fragments. Everything here
is regex and vocabulary based; nothing calls out to the network.
"""

from __future__ import annotations

import re
from typing import Optional

from models.customer import AddressDetails, AddressDraft, StructuredAddress

PINCODE_PATTERN = re.compile(r"\b\d{6}\b")

# Ordered: first match wins. Numbers directly followed by "floor" are floors.
BUILDING_PATTERNS = (
    re.compile(
        r"(?:building|bldg|house|flat|apt|apartment)?\s*(?:no\.?|number|#)?\s*"
        r"(\d+[\w\-/]*)(?![\w\-/])(?!\s*floor)",
        re.IGNORECASE,
    ),
    re.compile(r"^(\d+[\w\-/]*)(?![\w\-/])(?!\s*floor)\s+", re.IGNORECASE),
    re.compile(r"\b(\w+\s+(?:tower|complex|apartment|society|building))\b", re.IGNORECASE),
)

FLOOR_PATTERNS = (
    re.compile(r"(\d+)(?:st|nd|rd|th)?\s*floor", re.IGNORECASE),
    re.compile(r"\b(ground)\s+floor", re.IGNORECASE),
)

LANDMARK_KEYWORDS = ("near", "opposite", "opp", "behind", "next to", "beside", "above", "below")

CITY_VOCABULARY = (
    "mumbai",
    "delhi",
    "bangalore",
    "chennai",
    "kolkata",
    "pune",
    "hyderabad",
    "ahmedabad",
    "surat",
    "jaipur",
)

STREET_KEYWORDS = re.compile(
    r"\b(?:street|road|lane|marg|nagar|colony|park|society|complex|apartment|building)\b",
    re.IGNORECASE,
)

LOCATION_MARKER = "📍 Location attached"


class AddressResolver:
    """Heuristic parsing of typed addresses and pin details."""

    def extract_details(self, text: str) -> AddressDetails:
        """Pull building, floor and landmark fragments out of free text."""
        details = AddressDetails()
        cleaned = (text or "").strip()

        for pattern in BUILDING_PATTERNS:
            match = pattern.search(cleaned)
            if match:
                details.building = match.group(1)
                break

        for pattern in FLOOR_PATTERNS:
            match = pattern.search(cleaned)
            if match:
                details.floor = match.group(1).lower()
                break

        for keyword in LANDMARK_KEYWORDS:
            match = re.search(rf"\b{keyword}\s+([^,.]+)", cleaned, re.IGNORECASE)
            if match:
                details.landmark = match.group(1).strip()
                break

        if not details.building and not details.landmark:
            details.building = cleaned

        return details

    def parse_freeform(self, text: str) -> StructuredAddress:
        """Split a typed address into street, city and pincode."""
        cleaned = (text or "").strip()
        lowered = cleaned.lower()

        pincode_match = PINCODE_PATTERN.search(cleaned)

        city = "Unknown"
        for candidate in CITY_VOCABULARY:
            if candidate in lowered:
                city = candidate.capitalize()
                break

        segments = [segment.strip() for segment in re.split(r"[,\n]", cleaned) if segment.strip()]
        street = next((segment for segment in segments if STREET_KEYWORDS.search(segment)), None)
        if street is None:
            street = segments[0] if segments else cleaned[:50]

        return StructuredAddress(
            street=street,
            city=city,
            pincode=pincode_match.group(0) if pincode_match else "",
        )

    def find_pincode(self, text: Optional[str]) -> str:
        """Return the first 6-digit run in ``text`` or an empty string."""
        match = PINCODE_PATTERN.search(text or "")
        return match.group(0) if match else ""

    @staticmethod
    def is_valid_pincode(pincode: str) -> bool:
        return bool(re.fullmatch(r"\d{6}", pincode or ""))

    @staticmethod
    def format_address(address: StructuredAddress, landmark: Optional[str] = None) -> str:
        """Two-line display form: street (and landmark), then city and pincode."""
        formatted = address.street
        if landmark:
            formatted += f", {landmark}"
        formatted += f"\n{address.city} - {address.pincode}" if address.pincode else f"\n{address.city}"
        return formatted

    @staticmethod
    def summarize_draft(draft: AddressDraft) -> str:
        """
        Human-readable draft used in the confirmation prompt and as the
        confirmed summary.

        Detail text wins (with a marker when a pin is attached), then the typed
        address. A bare pin still yields the marker so the summary is never empty.
        """
        if draft.detail_text:
            summary = draft.detail_text
            if draft.coordinates:
                summary += f"\n{LOCATION_MARKER}"
            return summary
        if draft.free_text:
            return draft.free_text
        if draft.coordinates:
            return LOCATION_MARKER
        return ""
