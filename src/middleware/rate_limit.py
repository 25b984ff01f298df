"""클라이언트별 고정 윈도우 Rate Limit.

카운터 저장소는 RateLimitStore 인터페이스로 주입한다.
기본은 프로세스 메모리(InMemoryRateLimitStore); 여러 인스턴스가 한도를 공유해야 하면
같은 인터페이스로 분산 저장소를 구현해 교체한다.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Protocol

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Rate limit exceeded. Please wait and try again."


@dataclass
class RateLimitEntry:
    count: int
    window_start: float


class RateLimitStore(Protocol):
    def increment(self, key: str, now: float, window_s: float) -> RateLimitEntry:
        """key의 카운트를 1 올리고 갱신된 엔트리를 반환한다.

        윈도우가 만료됐으면 (count=1, window_start=now)로 새로 시작한다.
        """
        ...


class InMemoryRateLimitStore:
    def __init__(self, max_entries: int = 10_000):
        self._entries: dict[str, RateLimitEntry] = {}
        self._max_entries = max_entries

    def increment(self, key: str, now: float, window_s: float) -> RateLimitEntry:
        entry = self._entries.get(key)
        if entry is None and len(self._entries) >= self._max_entries:
            self.prune(now, window_s)
            # 만료된 엔트리가 없으면 가장 오래된 윈도우부터 내보낸다
            overflow = len(self._entries) - self._max_entries + 1
            if overflow > 0:
                self.evict_oldest(overflow)

        if entry is None or now - entry.window_start > window_s:
            entry = RateLimitEntry(count=1, window_start=now)
            self._entries[key] = entry
        else:
            entry.count += 1
        return entry

    def prune(self, now: float, window_s: float) -> None:
        """만료된 엔트리를 제거한다."""
        expired = [k for k, e in self._entries.items() if now - e.window_start > window_s]
        for key in expired:
            del self._entries[key]

    def evict_oldest(self, count: int) -> None:
        oldest = sorted(self._entries, key=lambda k: self._entries[k].window_start)[:count]
        for key in oldest:
            del self._entries[key]

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


def client_key(request: Request) -> str:
    """X-Forwarded-For 첫 번째 홉 → 소켓 호스트 → 'unknown'."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(
        self,
        app,
        store: RateLimitStore | None = None,
        max_requests: int = 30,
        window_s: float = 60.0,
    ):
        super().__init__(app)
        self.store = store if store is not None else InMemoryRateLimitStore()
        self.max_requests = max_requests
        self.window_s = window_s

    async def dispatch(self, request: Request, call_next):
        key = client_key(request)
        entry = self.store.increment(key, time.time(), self.window_s)

        if entry.count > self.max_requests:
            request_id = getattr(request.state, "request_id", None)
            logger.warning(
                "Rate limit exceeded: client=%s, count=%d, request_id=%s",
                key,
                entry.count,
                request_id,
                extra={"request_id": request_id},
            )
            return JSONResponse(
                status_code=429,
                content={"error": RATE_LIMIT_MESSAGE, "requestId": request_id},
            )

        return await call_next(request)
