"""글쓰기 도우미 API 엔드포인트.

  POST /chat     — 시트 내용 + 사용자 메시지 → 답변
  POST /partner  — 가이드형 글쓰기 파트너

요청 처리 순서:
  1. 필수 메시지 검증 (없거나 빈 문자열 → 400)
  2. 컨텍스트 + 새 입력을 "\\n"으로 합쳐 Guardrail 판정
  3. 차단 → 400 {error, category, message} (LLM 호출 없음)
  4. 통과 → WritingAssistant 호출
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse

from src.assistant.generator import AssistantError, WritingAssistant, get_assistant
from src.guardrail import GuardrailEngine, GuardrailVerdict, get_default_engine, safe_response_for
from src.types import (
    ChatMetadata,
    ChatRequest,
    ChatResponse,
    PartnerRequest,
    PartnerResponse,
)

router = APIRouter(tags=["chat"])
logger = logging.getLogger(__name__)

BLOCKED_ERROR = "Content blocked by safety filters"


def combine_text(context: str | None, new_input: str) -> str:
    """Guardrail 입력: 컨텍스트(시트)와 새 입력을 줄바꿈으로 연결."""
    return f"{context or ''}\n{new_input}"


def blocked_response(verdict: GuardrailVerdict, request: Request) -> JSONResponse:
    request_id = getattr(request.state, "request_id", None)
    logger.info(
        "Guardrail blocked request: category=%s, path=%s, request_id=%s",
        verdict.category.value,
        request.url.path,
        request_id,
        extra={"request_id": request_id},
    )
    return JSONResponse(
        status_code=400,
        content={
            "error": BLOCKED_ERROR,
            "category": verdict.category.value,
            "message": safe_response_for(verdict.category),
            "requestId": request_id,
        },
    )


def _require_text(value: str | None, field: str) -> str:
    if not value or not value.strip():
        raise HTTPException(status_code=400, detail=f"Missing or invalid {field}")
    return value


@router.post("/chat", response_model=ChatResponse)
async def chat(
    req: ChatRequest,
    request: Request,
    engine: GuardrailEngine = Depends(get_default_engine),
    assistant: WritingAssistant = Depends(get_assistant),
):
    """시트 내용을 컨텍스트로 사용자 메시지에 답한다."""
    user_message = _require_text(req.user_message, "userMessage")
    sheet_text = req.sheet_text or ""

    verdict = engine.evaluate(combine_text(sheet_text, user_message))
    if not verdict.allowed:
        return blocked_response(verdict, request)

    try:
        reply = await assistant.chat(sheet_text, user_message)
    except AssistantError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    return ChatResponse(
        response=reply,
        metadata=ChatMetadata(
            sheet_length=len(sheet_text),
            message_length=len(user_message),
        ),
    )


@router.post("/partner", response_model=PartnerResponse)
async def partner(
    req: PartnerRequest,
    request: Request,
    engine: GuardrailEngine = Depends(get_default_engine),
    assistant: WritingAssistant = Depends(get_assistant),
):
    """가이드형 글쓰기 파트너 응답."""
    message = _require_text(req.message, "message")
    sheet_content = req.sheet_content or ""

    verdict = engine.evaluate(combine_text(sheet_content, message))
    if not verdict.allowed:
        return blocked_response(verdict, request)

    try:
        reply = await assistant.partner(message, sheet_content)
    except AssistantError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    return PartnerResponse(
        response=reply.response,
        suggestion=reply.suggestion,
        metadata=ChatMetadata(
            sheet_length=len(sheet_content),
            message_length=len(message),
        ),
    )
