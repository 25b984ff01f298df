"""규칙 기반 텍스트 필터.

입력 텍스트를 정규화하고, 카테고리별 패턴 테이블(dictionary.py)을
컴파일된 DetectionRule로 만들어 우선순위 순서대로 매칭한다.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterable

from src.guardrail.dictionary import get_patterns
from src.types import CATEGORY_PRECEDENCE, ContentCategory

_WHITESPACE = re.compile(r"\s+")

# 타이포그래피 따옴표 → ASCII (i’ll → i'll)
_APOSTROPHES = str.maketrans({"’": "'", "‘": "'", "ʼ": "'"})


def normalize_text(text: str) -> str:
    """소문자화 + 공백 연속을 1칸으로 축약 + 앞뒤 공백 제거."""
    return _WHITESPACE.sub(" ", text.casefold().translate(_APOSTROPHES)).strip()


@dataclass(frozen=True)
class DetectionRule:
    category: ContentCategory
    pattern: re.Pattern


@dataclass(frozen=True)
class FilterMatch:
    category: ContentCategory
    position: int  # 정규화 텍스트 기준 char index


@lru_cache(maxsize=None)
def compile_rule(category: ContentCategory) -> DetectionRule | None:
    """카테고리의 패턴 목록을 단어 경계로 감싼 하나의 정규식으로 컴파일한다."""
    patterns = get_patterns(category)
    if not patterns:
        return None
    source = r"\b(?:" + "|".join(f"(?:{p})" for p in patterns) + r")\b"
    return DetectionRule(category=category, pattern=re.compile(source))


def build_rules(categories: Iterable[ContentCategory]) -> tuple[DetectionRule, ...]:
    """활성 카테고리의 규칙을 우선순위 순서로 반환한다.

    패턴 테이블이 없는 카테고리(spam, allowed)는 건너뛴다.
    """
    enabled = set(categories)
    rules = []
    for category in CATEGORY_PRECEDENCE:
        if category not in enabled:
            continue
        rule = compile_rule(category)
        if rule is not None:
            rules.append(rule)
    return tuple(rules)


class TextFilter:
    """우선순위 순서의 규칙 필터. 첫 매칭에서 평가를 중단한다."""

    def __init__(self, categories: Iterable[ContentCategory]):
        self._rules = build_rules(categories)

    @property
    def rules(self) -> tuple[DetectionRule, ...]:
        return self._rules

    def first_match(self, normalized: str) -> FilterMatch | None:
        """정규화된 텍스트에서 가장 우선순위가 높은 매칭을 반환한다."""
        if not normalized:
            return None

        for rule in self._rules:
            m = rule.pattern.search(normalized)
            if m is not None:
                return FilterMatch(category=rule.category, position=m.start())
        return None
