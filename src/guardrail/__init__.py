"""Content-safety guardrail module.

Local, rule-based gate in front of the writing assistant:
- Text normalization + ordered category detectors (first match wins)
- Configurable profiles (strict / narrative / full) and length limit
- Category-specific safe refusal messages
"""

from src.guardrail.checker import (
    GuardrailEngine,
    GuardrailInputError,
    GuardrailVerdict,
    evaluate,
    get_default_engine,
)
from src.guardrail.dictionary import FALLBACK_SAFE_RESPONSE, safe_response_for

__all__ = [
    "FALLBACK_SAFE_RESPONSE",
    "GuardrailEngine",
    "GuardrailInputError",
    "GuardrailVerdict",
    "evaluate",
    "get_default_engine",
    "safe_response_for",
]
