from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


# --- Enums ---


class ContentCategory(str, Enum):
    """가드레일 분류 카테고리.

    선언 순서가 곧 평가 우선순위다 (위가 더 심각).
    """

    SEXUAL_MINORS = "sexual_minors"
    INSTRUCTIONAL_HARM = "instructional_harm"
    TARGETED_THREAT = "targeted_threat"
    SELF_HARM = "self_harm"
    HARASSMENT = "harassment"
    HATE_SPEECH = "hate_speech"
    SEXUAL = "sexual"
    DANGEROUS = "dangerous"
    SPAM = "spam"
    ALLOWED = "allowed"


# Precedence order, highest severity first.
CATEGORY_PRECEDENCE: tuple[ContentCategory, ...] = tuple(ContentCategory)


# --- Request / Response ---


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class ChatRequest(_CamelModel):
    sheet_text: str | None = Field(default=None, alias="sheetText")
    user_message: str | None = Field(default=None, alias="userMessage")


class PartnerRequest(_CamelModel):
    message: str | None = None
    sheet_content: str | None = Field(default=None, alias="sheetContent")


class GuardrailCheckRequest(BaseModel):
    text: str


class ChatMetadata(_CamelModel):
    sheet_length: int = Field(serialization_alias="sheetLength")
    message_length: int = Field(serialization_alias="messageLength")
    guardrails_passed: bool = Field(default=True, serialization_alias="guardrailsPassed")


class ChatResponse(BaseModel):
    response: str
    metadata: ChatMetadata


class PartnerResponse(BaseModel):
    response: str
    suggestion: str | None = None
    metadata: ChatMetadata


class GuardrailCheckResponse(BaseModel):
    allowed: bool
    category: ContentCategory
    reason: str | None = None
    message: str | None = None
