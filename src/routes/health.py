"""Health Check 엔드포인트."""

import time

from fastapi import APIRouter

router = APIRouter(tags=["health"])

_start_time = time.time()


@router.get("/health")
async def health_check():
    return {
        "ok": True,
        "status": "ok",
        "uptime": round(time.time() - _start_time),
    }
