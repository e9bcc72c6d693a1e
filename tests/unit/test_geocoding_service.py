"""
Reverse geocoding tests with a mocked requests session.

Run with: pytest tests/unit/test_geocoding_service.py -v
"""

import sys
from pathlib import Path
from unittest.mock import MagicMock

import requests

SRC_PATH = Path(__file__).parent.parent.parent / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from models.delivery import UNKNOWN_LOCATION  # noqa: E402
from services.geocoding_service import GEOCODE_URL, GeocodingService  # noqa: E402

COLABA_RESPONSE = {
    "status": "OK",
    "results": [
        {
            "formatted_address": "Colaba, Mumbai, Maharashtra 400005, India",
            "address_components": [
                {"long_name": "Colaba", "types": ["sublocality"]},
                {"long_name": "Mumbai", "types": ["locality", "political"]},
                {"long_name": "Maharashtra", "types": ["administrative_area_level_1", "political"]},
                {"long_name": "India", "types": ["country", "political"]},
                {"long_name": "400005", "types": ["postal_code"]},
            ],
        }
    ],
}


def _session(payload=None, side_effect=None):
    session = MagicMock()
    if side_effect is not None:
        session.get.side_effect = side_effect
    else:
        response = MagicMock()
        response.json.return_value = payload
        session.get.return_value = response
    return session


class TestReverse:
    def test_no_api_key_means_unknown(self):
        session = _session(COLABA_RESPONSE)

        result = GeocodingService(api_key="", session=session).reverse(18.9067, 72.8147)

        assert result == UNKNOWN_LOCATION
        session.get.assert_not_called()

    def test_parses_components(self):
        session = _session(COLABA_RESPONSE)

        result = GeocodingService(api_key="key", timeout_seconds=2, session=session).reverse(18.9067, 72.8147)

        assert result.city == "Mumbai"
        assert result.postal_code == "400005"
        assert result.state == "Maharashtra"
        assert result.country == "India"
        session.get.assert_called_once_with(
            GEOCODE_URL,
            params={"latlng": "18.9067,72.8147", "key": "key"},
            timeout=2,
        )

    def test_nearby_pins_are_cached(self):
        session = _session(COLABA_RESPONSE)
        service = GeocodingService(api_key="key", session=session)

        service.reverse(18.90671, 72.81472)
        second = service.reverse(18.90669, 72.81468)

        assert second.postal_code == "400005"
        assert session.get.call_count == 1

    def test_timeout_means_unknown(self):
        session = _session(side_effect=requests.Timeout("slow"))

        assert GeocodingService(api_key="key", session=session).reverse(1.0, 2.0) == UNKNOWN_LOCATION

    def test_zero_results_are_not_cached(self):
        session = _session({"status": "ZERO_RESULTS", "results": []})
        service = GeocodingService(api_key="key", session=session)

        assert service.reverse(1.0, 2.0).is_unknown
        service.reverse(1.0, 2.0)

        assert session.get.call_count == 2

    def test_invalid_json_means_unknown(self):
        session = MagicMock()
        session.get.return_value.json.side_effect = ValueError("not json")

        assert GeocodingService(api_key="key", session=session).reverse(1.0, 2.0) == UNKNOWN_LOCATION
