"""Settings parsing tests."""

import pytest
from pydantic import ValidationError

from src.config import Settings


def test_allowed_origins_from_string():
    """allowed_origins should be parsed from a comma-separated string."""
    s = Settings(allowed_origins="http://localhost:5000,https://aca.example.com")
    assert s.allowed_origins == ["http://localhost:5000", "https://aca.example.com"]


def test_allowed_origins_from_string_with_spaces():
    """Spaces around origins should be stripped."""
    s = Settings(allowed_origins="http://a.com , https://b.com , http://c.com")
    assert s.allowed_origins == ["http://a.com", "https://b.com", "http://c.com"]


def test_allowed_origins_from_list():
    origins = ["http://localhost:5000", "https://aca.example.com"]
    s = Settings(allowed_origins=origins)
    assert s.allowed_origins == origins


def test_guardrail_categories_from_string():
    s = Settings(guardrail_categories="sexual_minors, self_harm,,spam")
    assert s.guardrail_categories == ["sexual_minors", "self_harm", "spam"]


def test_guardrail_categories_from_env(monkeypatch):
    monkeypatch.setenv("GUARDRAIL_CATEGORIES", "dangerous,spam")
    monkeypatch.setenv("GUARDRAIL_MAX_LENGTH", "50000")
    s = Settings()
    assert s.guardrail_categories == ["dangerous", "spam"]
    assert s.guardrail_max_length == 50_000


@pytest.mark.parametrize("value", [0, -10])
def test_guardrail_max_length_must_be_positive(value):
    with pytest.raises(ValidationError):
        Settings(guardrail_max_length=value)


def test_guardrail_defaults(monkeypatch):
    for name in ("GUARDRAIL_PROFILE", "GUARDRAIL_CATEGORIES", "GUARDRAIL_MAX_LENGTH", "GUARDRAIL_ENABLED"):
        monkeypatch.delenv(name, raising=False)
    s = Settings(_env_file=None)
    assert s.guardrail_enabled is True
    assert s.guardrail_profile == "narrative"
    assert s.guardrail_categories == []
    assert s.guardrail_max_length == 10_000
