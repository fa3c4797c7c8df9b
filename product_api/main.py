"""FastAPI 앱 — 로깅, 예외 핸들러, 미들웨어, 라우터 조립.

Usage:
    uvicorn product_api.main:app --reload
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from product_api.api import api_router
from product_api.config import settings
from product_api.middleware.axiom_logging import AxiomLoggingMiddleware
from product_api.middleware.error_handler import register_exception_handlers
from product_api.utils.logging import configure_logging

configure_logging(settings)

app: FastAPI = FastAPI(title=settings.APP_NAME, version="1.0.0")

register_exception_handlers(app)

# 나중에 추가한 미들웨어가 바깥쪽 — CORS wraps the Axiom logger
app.add_middleware(AxiomLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api")


@app.get("/health")
async def health_check() -> dict[str, str]:
    """로드 밸런서용 상태 확인 — Liveness check."""
    return {"status": "ok"}
