"""Logging formatter / setup tests."""

import json
import logging

from src.logging_config import CloudRunJsonFormatter, RequestTextFormatter, setup_logging


def _record(msg: str, **extra) -> logging.LogRecord:
    record = logging.LogRecord("src.routes.chat", logging.WARNING, __file__, 10, msg, (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_severity_and_request_id():
    payload = json.loads(CloudRunJsonFormatter().format(_record("blocked", request_id="req-7")))
    assert payload["severity"] == "WARNING"
    assert payload["message"] == "blocked"
    assert payload["requestId"] == "req-7"


def test_json_formatter_without_request_id():
    payload = json.loads(CloudRunJsonFormatter().format(_record("ok")))
    assert "requestId" not in payload


def test_cloud_run_uses_json(monkeypatch):
    monkeypatch.setenv("K_SERVICE", "aca-api")
    root = logging.getLogger()
    saved = list(root.handlers), root.level
    try:
        setup_logging(log_level="DEBUG")
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, CloudRunJsonFormatter)
    finally:
        root.handlers[:] = saved[0]
        root.setLevel(saved[1])


def test_local_file_handlers(monkeypatch, tmp_path):
    monkeypatch.delenv("K_SERVICE", raising=False)
    root = logging.getLogger()
    saved = list(root.handlers), root.level
    try:
        setup_logging(log_dir=str(tmp_path))
        assert (tmp_path / "api.log").exists()
        assert (tmp_path / "error.log").exists()
        assert len(root.handlers) == 3
    finally:
        for handler in root.handlers:
            if handler not in saved[0]:
                handler.close()
        root.handlers[:] = saved[0]
        root.setLevel(saved[1])


def test_text_formatter_tags_request_id():
    line = RequestTextFormatter().format(_record("blocked", request_id="req-7"))
    assert "[WARNING] src.routes.chat [req=req-7]: blocked" in line
    assert "\033[" not in line


def test_text_formatter_without_request_id():
    line = RequestTextFormatter().format(_record("ok"))
    assert line.endswith("[WARNING] src.routes.chat: ok")


def test_error_log_only_receives_errors(monkeypatch, tmp_path):
    monkeypatch.delenv("K_SERVICE", raising=False)
    root = logging.getLogger()
    saved = list(root.handlers), root.level
    try:
        setup_logging(log_dir=str(tmp_path))
        log = logging.getLogger("src.routes.chat")
        log.info("guardrail passed", extra={"request_id": "req-1"})
        log.error("assistant failed", extra={"request_id": "req-2"})
        for handler in root.handlers:
            handler.flush()

        api_log = (tmp_path / "api.log").read_text(encoding="utf-8")
        error_log = (tmp_path / "error.log").read_text(encoding="utf-8")
        assert "[req=req-1]: guardrail passed" in api_log
        assert "[req=req-2]: assistant failed" in api_log
        assert "guardrail passed" not in error_log
        assert "[req=req-2]: assistant failed" in error_log
    finally:
        for handler in root.handlers:
            if handler not in saved[0]:
                handler.close()
        root.handlers[:] = saved[0]
        root.setLevel(saved[1])


def test_uvicorn_loggers_propagate_to_root(monkeypatch):
    monkeypatch.setenv("K_SERVICE", "aca-api")
    root = logging.getLogger()
    saved = list(root.handlers), root.level
    uv_logger = logging.getLogger("uvicorn.access")
    uv_logger.addHandler(logging.NullHandler())
    try:
        setup_logging()
        assert uv_logger.handlers == []
        assert uv_logger.propagate is True
    finally:
        root.handlers[:] = saved[0]
        root.setLevel(saved[1])
