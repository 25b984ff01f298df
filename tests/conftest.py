"""Test fixtures for the ACA writing assistant API."""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from src.assistant.generator import PartnerReply, get_assistant
from src.guardrail import GuardrailEngine, get_default_engine


class FakeAssistant:
    """WritingAssistant 대체 — 호출 기록만 남긴다."""

    def __init__(self):
        self.chat_calls: list[tuple[str, str]] = []
        self.partner_calls: list[tuple[str, str]] = []

    async def chat(self, sheet_text: str, user_message: str) -> str:
        self.chat_calls.append((sheet_text, user_message))
        return "assistant reply"

    async def partner(self, message: str, sheet_content: str) -> PartnerReply:
        self.partner_calls.append((message, sheet_content))
        return PartnerReply(response="partner reply", suggestion="add detail")


@pytest.fixture
def narrative_engine() -> GuardrailEngine:
    return GuardrailEngine.from_profile("narrative")


@pytest.fixture
def strict_engine() -> GuardrailEngine:
    return GuardrailEngine.from_profile("strict")


@pytest.fixture
def full_engine() -> GuardrailEngine:
    return GuardrailEngine.from_profile("full")


@pytest.fixture
def fake_assistant() -> FakeAssistant:
    return FakeAssistant()


@pytest.fixture
def app(fake_assistant, narrative_engine):
    from src.main import app, rate_limit_store

    rate_limit_store.clear()
    app.dependency_overrides[get_assistant] = lambda: fake_assistant
    app.dependency_overrides[get_default_engine] = lambda: narrative_engine
    yield app
    app.dependency_overrides.clear()
    rate_limit_store.clear()


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
