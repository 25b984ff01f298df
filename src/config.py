from pathlib import Path
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode

# 프로젝트 루트의 .env 파일 경로 (config.py → src → root)
_ROOT_DIR = Path(__file__).resolve().parents[1]
_ENV_FILE = _ROOT_DIR / ".env"


def _split_csv(v):
    if isinstance(v, str):
        return [item.strip() for item in v.split(",") if item.strip()]
    return v


class Settings(BaseSettings):
    # Server
    server_host: str = "0.0.0.0"
    server_port: int = 8080

    # CORS
    allowed_origins: Annotated[list[str], NoDecode] = Field(
        default=[
            "http://localhost:5000",
            "http://localhost:5173",
        ],
        description="CORS allowed origins",
    )

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def parse_origins(cls, v):
        return _split_csv(v)

    # Guardrail
    guardrail_enabled: bool = True
    guardrail_profile: str = "narrative"  # strict | narrative | full
    guardrail_categories: Annotated[list[str], NoDecode] = Field(
        default=[],
        description="Explicit category list; overrides guardrail_profile when non-empty",
    )
    guardrail_max_length: int = Field(default=10_000, gt=0)  # 원문 길이 상한 (초과 시 spam)

    @field_validator("guardrail_categories", mode="before")
    @classmethod
    def parse_categories(cls, v):
        return _split_csv(v)

    # Rate limit (고정 윈도우, 클라이언트별)
    rate_limit_max_requests: int = 30
    rate_limit_window_s: float = 60.0

    # Writing assistant (downstream LLM)
    openai_api_key: str = ""
    assistant_model: str = "gpt-4o-mini"
    assistant_timeout_s: float = 20.0
    assistant_max_tokens: int = 800

    # Logging
    log_level: str = "INFO"
    log_dir: str = "logs"
    log_max_bytes: int = 10_485_760  # 10MB
    log_backup_count: int = 5

    model_config = {
        "env_file": str(_ENV_FILE),
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


settings = Settings()
