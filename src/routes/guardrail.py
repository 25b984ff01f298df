"""Guardrail 진단 엔드포인트.

POST /guardrail/check — 텍스트 판정 결과만 반환 (LLM 호출 없음).
"""

from fastapi import APIRouter, Depends

from src.guardrail import GuardrailEngine, get_default_engine, safe_response_for
from src.types import GuardrailCheckRequest, GuardrailCheckResponse

router = APIRouter(tags=["guardrail"])


@router.post("/guardrail/check", response_model=GuardrailCheckResponse)
async def check_text(
    req: GuardrailCheckRequest,
    engine: GuardrailEngine = Depends(get_default_engine),
):
    verdict = engine.evaluate(req.text)
    return GuardrailCheckResponse(
        allowed=verdict.allowed,
        category=verdict.category,
        reason=verdict.reason,
        message=None if verdict.allowed else safe_response_for(verdict.category),
    )
