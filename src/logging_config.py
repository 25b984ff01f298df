"""ACA API 로깅 설정.

Cloud Run → JSON stdout (severity 필드로 Cloud Logging이 자동 파싱)
로컬      → 텍스트 콘솔 + RotatingFileHandler (api.log, error.log)

미들웨어/라우트는 extra={"request_id": ...}로 요청 ID를 넘긴다.
JSON에는 requestId 필드로, 텍스트에는 [req=...] 태그로 남는다.
"""

import json
import logging
import os
import traceback
from logging.handlers import RotatingFileHandler
from pathlib import Path

_TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s%(request_tag)s: %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class CloudRunJsonFormatter(logging.Formatter):
    """한 줄에 JSON 객체 하나. Cloud Logging 호환."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict = {
            "severity": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        request_id = getattr(record, "request_id", None)
        if request_id:
            payload["requestId"] = request_id
        if record.exc_info and record.exc_info[1] is not None:
            payload["exception"] = "".join(traceback.format_exception(*record.exc_info))
        return json.dumps(payload, ensure_ascii=False)


class RequestTextFormatter(logging.Formatter):
    """콘솔/파일 공용 텍스트 포맷. 요청 ID가 있으면 로거 이름 뒤에 붙인다."""

    def __init__(self):
        super().__init__(_TEXT_FORMAT, datefmt=_DATE_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        request_id = getattr(record, "request_id", None)
        record.request_tag = f" [req={request_id}]" if request_id else ""
        return super().format(record)


def _rotating_handler(path: Path, max_bytes: int, backup_count: int) -> RotatingFileHandler:
    handler = RotatingFileHandler(path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")
    handler.setFormatter(RequestTextFormatter())
    return handler


def setup_logging(
    *,
    log_level: str = "INFO",
    log_dir: str = "logs",
    max_bytes: int = 10_485_760,
    backup_count: int = 5,
) -> None:
    """루트 로거 구성. K_SERVICE(Cloud Run이 자동 설정)로 환경을 구분한다.

    log_dir이 빈 문자열이면 로컬에서도 파일 핸들러를 만들지 않는다.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    if "K_SERVICE" in os.environ:
        handler = logging.StreamHandler()
        handler.setFormatter(CloudRunJsonFormatter())
        root.addHandler(handler)
    else:
        console = logging.StreamHandler()
        console.setFormatter(RequestTextFormatter())
        root.addHandler(console)

        if log_dir:
            log_path = Path(log_dir)
            log_path.mkdir(parents=True, exist_ok=True)
            root.addHandler(_rotating_handler(log_path / "api.log", max_bytes, backup_count))
            error_handler = _rotating_handler(log_path / "error.log", max_bytes, backup_count)
            error_handler.setLevel(logging.ERROR)
            root.addHandler(error_handler)

    # uvicorn 로그도 루트 핸들러로 보낸다
    for name in ("uvicorn", "uvicorn.access", "uvicorn.error"):
        uv_logger = logging.getLogger(name)
        uv_logger.handlers.clear()
        uv_logger.propagate = True
