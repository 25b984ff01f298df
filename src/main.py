import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.config import settings
from src.guardrail import get_default_engine
from src.logging_config import setup_logging
from src.middleware.rate_limit import InMemoryRateLimitStore, RateLimitMiddleware
from src.middleware.request_id import RequestIdMiddleware
from src.routes.chat import router as chat_router
from src.routes.guardrail import router as guardrail_router
from src.routes.health import router as health_router

setup_logging(
    log_level=settings.log_level,
    log_dir=settings.log_dir,
    max_bytes=settings.log_max_bytes,
    backup_count=settings.log_backup_count,
)
logger = logging.getLogger("aca-api")

rate_limit_store = InMemoryRateLimitStore()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        "ACA API starting on %s:%s",
        settings.server_host,
        settings.server_port,
    )
    # 설정 오류(알 수 없는 프로필/카테고리)는 기동 시점에 드러나도록 미리 생성
    get_default_engine()
    yield


app = FastAPI(
    title="ACA Writing Assistant API",
    version="3.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(
    RateLimitMiddleware,
    store=rate_limit_store,
    max_requests=settings.rate_limit_max_requests,
    window_s=settings.rate_limit_window_s,
)

# 마지막에 추가 → 가장 바깥 (rate limit 응답에도 request_id 부여)
app.add_middleware(RequestIdMiddleware)


def _request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail, "requestId": _request_id(request)},
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request body", "requestId": _request_id(request)},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error("Unhandled exception on %s", request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "requestId": _request_id(request)},
    )


# 호스팅 rewrite(/api/*)와 직접 호출(/*) 모두 지원
for router in (health_router, chat_router, guardrail_router):
    app.include_router(router)
    app.include_router(router, prefix="/api", include_in_schema=False)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.main:app",
        host=settings.server_host,
        port=settings.server_port,
    )
