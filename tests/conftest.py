"""
Pytest configuration to ensure paths are set up correctly for tests.

This allows imports like `from handlers import webhook` to work when running
tests, simulating the Lambda environment where code is deployed from the
src/ directory.
"""

import os
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest


def _ensure_paths_on_sys_path() -> None:
    """Add src/ to sys.path if missing (Lambda's Code.from_asset("src") root)."""
    src_root = Path(__file__).resolve().parents[1] / "src"
    src_str = str(src_root)
    if src_str not in sys.path:
        sys.path.insert(0, src_str)


_ensure_paths_on_sys_path()

# Offline-friendly defaults so tests never reach AWS, Meta or Google.
os.environ.setdefault("AWS_REGION", "eu-west-2")
os.environ.setdefault("AWS_DEFAULT_REGION", "eu-west-2")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "test")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "test")
os.environ.setdefault("ENVIRONMENT", "dev")
os.environ.setdefault("CUSTOMERS_TABLE", "")
os.environ.setdefault("WHATSAPP_ACCESS_TOKEN", "")
os.environ.setdefault("GOOGLE_MAPS_API_KEY", "")
os.environ.setdefault("WEBHOOK_VERIFY_TOKEN", "test-verify-token")


class FakeGeocoder:
    """Returns a fixed answer and records calls."""

    def __init__(self, city="Unknown", postal_code=""):
        from models.delivery import GeocodeResult

        self.result = GeocodeResult(city=city, postal_code=postal_code)
        self.calls = []

    def reverse(self, lat, lng):
        self.calls.append((lat, lng))
        return self.result


class RecordingTransport:
    """Collects what would have been sent."""

    def __init__(self):
        self.sent = []

    def deliver_batch(self, identifier, payloads):
        from models.delivery import DeliveryResult

        self.sent.append((identifier, list(payloads)))
        return [DeliveryResult(ok=True, message_id=f"wamid.{i}") for i, _ in enumerate(payloads)]


@pytest.fixture
def fixed_now():
    return datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def unknown_geocoder():
    return FakeGeocoder()


@pytest.fixture
def colaba_geocoder():
    return FakeGeocoder(city="Mumbai", postal_code="400005")


@pytest.fixture
def engine(unknown_geocoder):
    from services.conversation_engine import ConversationEngine
    from services.delivery_eligibility import DeliveryEligibility

    return ConversationEngine(eligibility=DeliveryEligibility(geocoder=unknown_geocoder))


@pytest.fixture
def recording_transport():
    return RecordingTransport()
