"""
WhatsApp transport tests with a mocked requests session.

Run with: pytest tests/unit/test_whatsapp_transport.py -v
"""

import sys
from pathlib import Path
from unittest.mock import MagicMock

import requests

SRC_PATH = Path(__file__).parent.parent.parent / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from services.whatsapp_transport import WhatsAppTransport  # noqa: E402

TEXT = {"type": "text", "text": {"body": "hello"}}


def _response(ok=True, status_code=200, payload=None):
    response = MagicMock()
    response.ok = ok
    response.status_code = status_code
    response.content = b"{}"
    response.json.return_value = payload or {}
    return response


def _transport(session, **kwargs):
    return WhatsAppTransport(phone_number_id="1234", access_token="token", session=session, **kwargs)


class TestDeliver:
    def test_disabled_without_token(self):
        session = MagicMock()
        transport = WhatsAppTransport(phone_number_id="1234", access_token="", session=session)

        result = transport.deliver("919800000001", TEXT)

        assert transport.enabled is False
        assert result.ok is False
        session.post.assert_not_called()

    def test_posts_envelope(self):
        session = MagicMock()
        session.post.return_value = _response(payload={"messages": [{"id": "wamid.out"}]})

        result = _transport(session, api_version="v19.0").deliver("919800000001", TEXT)

        assert result.ok is True
        assert result.message_id == "wamid.out"
        args, kwargs = session.post.call_args
        assert args[0] == "https://graph.facebook.com/v19.0/1234/messages"
        assert kwargs["headers"]["Authorization"] == "Bearer token"
        assert kwargs["json"] == {
            "messaging_product": "whatsapp",
            "recipient_type": "individual",
            "to": "919800000001",
            "type": "text",
            "text": {"body": "hello"},
        }
        assert kwargs["timeout"] == 10.0

    def test_api_error_is_reported(self):
        session = MagicMock()
        session.post.return_value = _response(
            ok=False, status_code=400, payload={"error": {"message": "Invalid parameter"}}
        )

        result = _transport(session).deliver("919800000001", TEXT)

        assert result.ok is False
        assert result.error == "Invalid parameter"

    def test_network_error_is_reported(self):
        session = MagicMock()
        session.post.side_effect = requests.ConnectionError("refused")

        result = _transport(session).deliver("919800000001", TEXT)

        assert result.ok is False
        assert "refused" in result.error


class TestDeliverBatch:
    def test_pacing_between_sends(self):
        session = MagicMock()
        session.post.return_value = _response(payload={"messages": [{"id": "wamid.out"}]})
        sleep = MagicMock()

        results = _transport(session, pacing_seconds=1.5, sleep=sleep).deliver_batch("919800000001", [TEXT, TEXT, TEXT])

        assert [r.ok for r in results] == [True, True, True]
        assert sleep.call_count == 2
        sleep.assert_called_with(1.5)

    def test_one_failure_does_not_stop_the_batch(self):
        session = MagicMock()
        session.post.side_effect = [requests.Timeout("slow"), _response(payload={"messages": [{"id": "wamid.2"}]})]

        results = _transport(session).deliver_batch("919800000001", [TEXT, TEXT])

        assert [r.ok for r in results] == [False, True]
