"""Writing assistant LLM 호출 (GPT-4o-mini).

Guardrail을 통과한 요청만 이 모듈까지 도달한다.
  - chat: 작성 중인 시트 + 사용자 메시지 → 답변
  - partner: 가이드형 글쓰기 파트너 → 답변 + 선택적 제안
  - API 키가 없으면 DEV MODE 응답 (외부 호출 없음)
  - 타임아웃/에러 → AssistantError (라우트에서 502)
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from dataclasses import dataclass

from openai import AsyncOpenAI

from src.config import settings

logger = logging.getLogger(__name__)

DEV_MODE_RESPONSE = "[DEV MODE] AI response would go here. OPENAI_API_KEY not configured."

_CHAT_SYSTEM_PROMPT = (
    "You are a supportive writing assistant.\n"
    "The user is working on a writing sheet and will share its current content.\n"
    "Answer the user's request using the sheet as context.\n"
    "Keep the writer's voice. Do not invent facts about the writer's life."
)

_PARTNER_SYSTEM_PROMPT = (
    "You are a guided writing partner helping someone develop a personal narrative.\n"
    "Ask thoughtful follow-up questions and offer at most one concrete suggestion.\n"
    'Reply as JSON: {"response": "<your reply>", "suggestion": "<suggestion or null>"}'
)

# DEV MODE 파트너 응답 (메시지 길이로 선택 — 결정적)
_DEV_PARTNER_REPLIES: tuple[tuple[str, str | None], ...] = (
    (
        "That's an interesting point. Could you tell me more about what led to that moment?",
        None,
    ),
    (
        "I can help you expand on that. Here's a suggestion:",
        "Consider adding sensory details like what you saw, heard, or felt in that moment.",
    ),
    (
        "Let's work on making this clearer.",
        "Try rephrasing this in your own words, as if you were telling a friend.",
    ),
)


class AssistantError(Exception):
    """Downstream LLM 호출 실패 (타임아웃 포함)."""


@dataclass
class PartnerReply:
    response: str
    suggestion: str | None = None


class WritingAssistant:
    """OpenAI Chat Completions 기반 글쓰기 도우미."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        timeout_s: float | None = None,
        max_tokens: int | None = None,
    ):
        key = settings.openai_api_key if api_key is None else api_key
        self._client = AsyncOpenAI(api_key=key) if key else None
        self._model = model or settings.assistant_model
        self._timeout_s = timeout_s or settings.assistant_timeout_s
        self._max_tokens = max_tokens or settings.assistant_max_tokens

    @property
    def dev_mode(self) -> bool:
        return self._client is None

    async def chat(self, sheet_text: str, user_message: str) -> str:
        """시트 내용을 컨텍스트로 사용자 메시지에 답한다."""
        if self.dev_mode:
            return DEV_MODE_RESPONSE

        user_content = f"Writing sheet:\n\n{sheet_text}\n\nRequest:\n\n{user_message}"
        return await self._complete(_CHAT_SYSTEM_PROMPT, user_content)

    async def partner(self, message: str, sheet_content: str) -> PartnerReply:
        """글쓰기 파트너 응답을 생성한다."""
        if self.dev_mode:
            response, suggestion = _DEV_PARTNER_REPLIES[len(message) % len(_DEV_PARTNER_REPLIES)]
            return PartnerReply(response=response, suggestion=suggestion)

        user_content = f"Current draft:\n\n{sheet_content}\n\nWriter says:\n\n{message}"
        raw = await self._complete(_PARTNER_SYSTEM_PROMPT, user_content)
        return _parse_partner_reply(raw)

    async def _complete(self, system_prompt: str, user_content: str) -> str:
        start = time.monotonic()
        try:
            response = await asyncio.wait_for(
                self._client.chat.completions.create(
                    model=self._model,
                    temperature=0.7,
                    max_tokens=self._max_tokens,
                    messages=[
                        {"role": "system", "content": system_prompt},
                        {"role": "user", "content": user_content},
                    ],
                ),
                timeout=self._timeout_s,
            )
        except asyncio.TimeoutError as exc:
            logger.warning(
                "Assistant timeout (%.0fms > %.0fms limit)",
                (time.monotonic() - start) * 1000,
                self._timeout_s * 1000,
            )
            raise AssistantError("Writing assistant timed out") from exc
        except Exception as exc:
            logger.exception("Assistant LLM error")
            raise AssistantError("Writing assistant request failed") from exc

        content = (response.choices[0].message.content or "").strip()
        logger.info(
            "Assistant completed (%s, %.0fms, %d chars)",
            self._model,
            (time.monotonic() - start) * 1000,
            len(content),
        )
        return content


def _parse_partner_reply(raw: str) -> PartnerReply:
    """JSON 응답을 파싱한다. JSON이 아니면 전체를 response로 사용."""
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        return PartnerReply(response=raw)

    if not isinstance(data, dict) or not isinstance(data.get("response"), str):
        return PartnerReply(response=raw)

    suggestion = data.get("suggestion")
    return PartnerReply(
        response=data["response"],
        suggestion=suggestion if isinstance(suggestion, str) and suggestion else None,
    )


_assistant: WritingAssistant | None = None


def get_assistant() -> WritingAssistant:
    """FastAPI dependency — 프로세스당 1개 인스턴스."""
    global _assistant
    if _assistant is None:
        _assistant = WritingAssistant()
    return _assistant
