"""
Message composer tests.

Run with: pytest tests/unit/test_message_composer.py -v
"""

import sys
from pathlib import Path

import pytest

SRC_PATH = Path(__file__).parent.parent.parent / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from models.intents import (  # noqa: E402
    Choice,
    ChoicePromptIntent,
    ListPromptIntent,
    ListRow,
    ListSection,
    LocationRequestIntent,
    TextIntent,
)
from services.message_composer import MessageComposer  # noqa: E402


@pytest.fixture
def composer():
    return MessageComposer()


class TestCompose:
    def test_text(self, composer):
        assert composer.compose(TextIntent(text="hello")) == {"type": "text", "text": {"body": "hello"}}

    def test_choice_prompt(self, composer):
        payload = composer.compose(
            ChoicePromptIntent(
                text="Confirm?",
                choices=[Choice(id="confirm", title="✅ Confirm"), Choice(id="change", title="✏️ Change")],
            )
        )

        assert payload["type"] == "interactive"
        interactive = payload["interactive"]
        assert interactive["type"] == "button"
        assert interactive["body"] == {"text": "Confirm?"}
        assert [b["reply"]["id"] for b in interactive["action"]["buttons"]] == ["confirm", "change"]
        assert all(b["type"] == "reply" for b in interactive["action"]["buttons"])
        assert "header" not in interactive
        assert "footer" not in interactive

    def test_long_button_title_is_clipped(self, composer):
        payload = composer.compose(
            ChoicePromptIntent(text="x", choices=[Choice(id="a", title="A really long button title here")])
        )

        title = payload["interactive"]["action"]["buttons"][0]["reply"]["title"]
        assert len(title) == 20
        assert title.endswith("…")

    def test_header_and_footer(self, composer):
        payload = composer.compose(
            ChoicePromptIntent(text="x", choices=[Choice(id="a", title="A")], header="Hi", footer="Bye")
        )

        assert payload["interactive"]["header"] == {"type": "text", "text": "Hi"}
        assert payload["interactive"]["footer"] == {"text": "Bye"}

    def test_list_prompt(self, composer):
        payload = composer.compose(
            ListPromptIntent(
                text="Pick a category",
                button_label="Browse",
                sections=[
                    ListSection(
                        title="Food",
                        rows=[ListRow(id="pizza", title="Pizza", description="Wood fired"), ListRow(id="burger", title="Burgers")],
                    )
                ],
            )
        )

        interactive = payload["interactive"]
        assert interactive["type"] == "list"
        assert interactive["action"]["button"] == "Browse"
        rows = interactive["action"]["sections"][0]["rows"]
        assert rows[0] == {"id": "pizza", "title": "Pizza", "description": "Wood fired"}
        assert rows[1] == {"id": "burger", "title": "Burgers"}

    def test_location_request(self, composer):
        payload = composer.compose(LocationRequestIntent(text="Share your pin"))

        assert payload["interactive"]["type"] == "location_request_message"
        assert payload["interactive"]["action"] == {"name": "send_location"}

    def test_unknown_intent_rejected(self, composer):
        with pytest.raises(TypeError):
            composer.compose({"kind": "text", "text": "raw dict"})

    def test_batch_keeps_order(self, composer):
        payloads = composer.compose_batch([TextIntent(text="one"), LocationRequestIntent(text="two")])

        assert payloads[0]["type"] == "text"
        assert payloads[1]["interactive"]["type"] == "location_request_message"
