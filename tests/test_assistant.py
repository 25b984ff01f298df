"""WritingAssistant (downstream LLM client) tests."""

import asyncio
import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.assistant.generator import (
    DEV_MODE_RESPONSE,
    AssistantError,
    PartnerReply,
    WritingAssistant,
    _parse_partner_reply,
)


def _completion(content: str):
    response = MagicMock()
    response.choices = [MagicMock()]
    response.choices[0].message.content = content
    return response


def _assistant_with(create) -> WritingAssistant:
    assistant = WritingAssistant(api_key="sk-test", model="gpt-4o-mini", timeout_s=0.5)
    client = MagicMock()
    client.chat.completions.create = create
    assistant._client = client
    return assistant


@pytest.mark.asyncio
class TestDevMode:
    async def test_chat_without_key(self):
        assistant = WritingAssistant(api_key="")
        assert assistant.dev_mode
        assert await assistant.chat("sheet", "hello") == DEV_MODE_RESPONSE

    async def test_partner_without_key_is_deterministic(self):
        assistant = WritingAssistant(api_key="")
        first = await assistant.partner("Tell me more", "")
        second = await assistant.partner("Tell me more", "")
        assert first == second
        assert first.response


@pytest.mark.asyncio
class TestCompletion:
    async def test_chat_returns_content(self):
        create = AsyncMock(return_value=_completion("  A stronger opening.  "))
        assistant = _assistant_with(create)

        reply = await assistant.chat("Draft text", "Improve the opening")

        assert reply == "A stronger opening."
        kwargs = create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o-mini"
        assert "Draft text" in kwargs["messages"][1]["content"]
        assert "Improve the opening" in kwargs["messages"][1]["content"]

    async def test_partner_parses_json(self):
        payload = json.dumps({"response": "What did the room smell like?", "suggestion": "Add a smell."})
        assistant = _assistant_with(AsyncMock(return_value=_completion(payload)))

        reply = await assistant.partner("We arrived at night.", "Draft")

        assert reply == PartnerReply(response="What did the room smell like?", suggestion="Add a smell.")

    async def test_api_error_raises_assistant_error(self):
        assistant = _assistant_with(AsyncMock(side_effect=RuntimeError("boom")))
        with pytest.raises(AssistantError):
            await assistant.chat("", "hello")

    async def test_timeout_raises_assistant_error(self):
        async def slow(**kwargs):
            await asyncio.sleep(5)

        assistant = _assistant_with(slow)
        with pytest.raises(AssistantError):
            await assistant.chat("", "hello")


class TestParsePartnerReply:
    def test_plain_text(self):
        assert _parse_partner_reply("Just text") == PartnerReply(response="Just text")

    def test_null_suggestion(self):
        raw = json.dumps({"response": "Nice.", "suggestion": None})
        assert _parse_partner_reply(raw) == PartnerReply(response="Nice.", suggestion=None)

    def test_json_without_response_field(self):
        raw = json.dumps({"text": "Nice."})
        assert _parse_partner_reply(raw) == PartnerReply(response=raw)
