"""Guardrail 판정 엔진.

입력 텍스트 하나를 받아 GuardrailVerdict 하나를 돌려준다.

  text
    -> normalize (casefold, 공백 축약)
    -> 카테고리 규칙을 우선순위 순서로 매칭 (첫 매칭에서 중단)
      - sexual_minors > instructional_harm > targeted_threat > self_harm
        > harassment > hate_speech > sexual > dangerous
    -> 매칭 없음 + 원문 길이 > max_length -> spam
    -> 그 외 allowed

엔진은 생성 후 불변이며 I/O가 없으므로 여러 요청에서 동시에 호출해도 안전하다.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterable

from src.guardrail.dictionary import (
    DEFAULT_MAX_LENGTH,
    DEFAULT_PROFILE,
    get_profile,
    get_reason,
    parse_category,
)
from src.guardrail.filter import TextFilter, normalize_text
from src.types import CATEGORY_PRECEDENCE, ContentCategory

logger = logging.getLogger(__name__)


class GuardrailInputError(TypeError):
    """evaluate()에 문자열이 아닌 값이 전달됨."""


@dataclass(frozen=True)
class GuardrailVerdict:
    """Guardrail 판정 결과."""
    category: ContentCategory
    reason: str | None = None

    @property
    def allowed(self) -> bool:
        return self.category == ContentCategory.ALLOWED

    def to_dict(self) -> dict:
        return {
            "allowed": self.allowed,
            "category": self.category.value,
            "reason": self.reason,
        }


ALLOWED_VERDICT = GuardrailVerdict(category=ContentCategory.ALLOWED)


def resolve_categories(values: Iterable[ContentCategory | str]) -> frozenset[ContentCategory]:
    """설정 값(문자열 또는 enum)을 ContentCategory 집합으로 변환한다.

    Raises:
        ValueError: 알 수 없는 카테고리 이름
    """
    resolved = set()
    for value in values:
        category = parse_category(value)
        if category is None:
            raise ValueError(f"Unknown guardrail category: {value!r}")
        if category != ContentCategory.ALLOWED:
            resolved.add(category)
    return frozenset(resolved)


class GuardrailEngine:
    """규칙 기반 콘텐츠 안전 판정기.

    Args:
        enabled_categories: 평가할 카테고리. None이면 기본 프로필.
        max_length: 원문 길이 상한 (초과 시 spam).
        enabled: False이면 모든 입력을 allowed로 통과시킨다.
    """

    def __init__(
        self,
        enabled_categories: Iterable[ContentCategory | str] | None = None,
        max_length: int = DEFAULT_MAX_LENGTH,
        enabled: bool = True,
    ):
        if isinstance(max_length, bool) or not isinstance(max_length, int) or max_length <= 0:
            raise ValueError(f"max_length must be a positive integer, got {max_length!r}")

        if enabled_categories is None:
            enabled_categories = get_profile(DEFAULT_PROFILE)

        self._enabled = enabled
        self._max_length = max_length
        self._categories = resolve_categories(enabled_categories)
        self._text_filter = TextFilter(self._categories)

    @classmethod
    def from_profile(
        cls,
        profile: str,
        max_length: int = DEFAULT_MAX_LENGTH,
        enabled: bool = True,
    ) -> GuardrailEngine:
        return cls(get_profile(profile), max_length=max_length, enabled=enabled)

    @classmethod
    def from_settings(cls, settings) -> GuardrailEngine:
        """Settings의 guardrail_* 값으로 엔진을 만든다.

        guardrail_categories가 비어 있지 않으면 프로필보다 우선한다.
        """
        if settings.guardrail_categories:
            categories = settings.guardrail_categories
        else:
            categories = get_profile(settings.guardrail_profile)
        return cls(
            categories,
            max_length=settings.guardrail_max_length,
            enabled=settings.guardrail_enabled,
        )

    @property
    def enabled_categories(self) -> tuple[ContentCategory, ...]:
        """활성 카테고리 (우선순위 순)."""
        return tuple(c for c in CATEGORY_PRECEDENCE if c in self._categories)

    @property
    def max_length(self) -> int:
        return self._max_length

    @property
    def enabled(self) -> bool:
        return self._enabled

    def evaluate(self, text: str) -> GuardrailVerdict:
        """텍스트를 판정한다.

        Raises:
            GuardrailInputError: text가 str이 아닐 때
        """
        if not isinstance(text, str):
            raise GuardrailInputError(
                f"Guardrail input must be str, got {type(text).__name__}"
            )

        if not self._enabled:
            return ALLOWED_VERDICT

        match = self._text_filter.first_match(normalize_text(text))
        if match is not None:
            logger.debug(
                "Guardrail rule matched: category=%s, position=%d",
                match.category.value,
                match.position,
            )
            return GuardrailVerdict(category=match.category, reason=get_reason(match.category))

        # 길이 검사는 정규화 전 원문 기준
        if ContentCategory.SPAM in self._categories and len(text) > self._max_length:
            return GuardrailVerdict(
                category=ContentCategory.SPAM,
                reason=get_reason(ContentCategory.SPAM),
            )

        return ALLOWED_VERDICT


@lru_cache(maxsize=1)
def get_default_engine() -> GuardrailEngine:
    """settings 기반 기본 엔진 (프로세스당 1회 생성)."""
    from src.config import settings

    engine = GuardrailEngine.from_settings(settings)
    logger.info(
        "Guardrail engine ready: enabled=%s, categories=%s, max_length=%d",
        engine.enabled,
        ",".join(c.value for c in engine.enabled_categories),
        engine.max_length,
    )
    return engine


def evaluate(text: str) -> GuardrailVerdict:
    """기본 엔진으로 텍스트를 판정한다."""
    return get_default_engine().evaluate(text)
