"""전역 예외 핸들러 — 모든 오류를 통일된 JSON 봉투로 변환.

Global exception handlers — Translate every error into the uniform JSON
envelope {success: false, message, errors?}.

Classification (status):
    - RequestValidationError: 요청 본문/쿼리 검증 실패 (400, per-field errors)
    - ModelValidationError: ORM 모델 검증 실패 (400, per-field errors)
    - IntegrityError unique: 고유 제약 위반 (409)
    - IntegrityError foreign key: 외래 키 제약 위반 (400)
    - jwt.ExpiredSignatureError: 만료 토큰 (401 "Token expired")
    - jwt.InvalidTokenError: 위조/손상 토큰 (401 "Invalid token")
    - HTTPException: 상태 코드를 가진 애플리케이션 오류 (its own status)
    - 그 외 모든 예외: 500, 운영 환경에서는 메시지/스택 숨김
      (anything else: 500; message hidden in production, stack only in development)
"""

import re
import traceback
from typing import Any

import jwt
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from product_api.config import settings
from product_api.utils.exceptions import ModelValidationError
from product_api.utils.logging import get_logger

logger = get_logger(__name__)

# PostgreSQL SQLSTATE 코드 — Integrity violation classes
_UNIQUE_VIOLATION: str = "23505"
_FOREIGN_KEY_VIOLATION: str = "23503"

# 드라이버 메시지에서 컬럼 추출 — Column extraction from driver messages
# PostgreSQL: 'Key (email)=(a@b.c) already exists.'  SQLite: 'UNIQUE constraint failed: users.email'
_PG_KEY_PATTERN = re.compile(r"Key \(([^)]+)\)=")
_SQLITE_UNIQUE_PATTERN = re.compile(r"UNIQUE constraint failed: ([\w., ]+)")


def _error_body(message: str, **extra: Any) -> dict[str, Any]:
    """오류 봉투를 구성합니다 — Build the error envelope."""
    body: dict[str, Any] = {"success": False, "message": message}
    body.update(extra)
    return body


def _field_from_loc(loc: tuple[Any, ...] | list[Any]) -> str:
    """검증 오류 위치를 필드 이름으로 변환합니다.

    Turn a pydantic error location into a field name:
    ("body", "email") → "email", ("query", "minPrice") → "minPrice",
    ("body",) → "body".
    """
    parts = [str(p) for p in loc if p not in ("body", "query", "path", "header")]
    if parts:
        return ".".join(parts)
    return "body"


def _validation_message(error: dict[str, Any]) -> str:
    """검증 오류 메시지를 추출합니다.

    Prefer the ValueError text raised by our validators over pydantic's
    "Value error, ..." wrapper.
    """
    ctx: dict[str, Any] = error.get("ctx") or {}
    if error.get("type") == "value_error" and ctx.get("error") is not None:
        return str(ctx["error"])
    return str(error.get("msg", "Invalid value"))


def _sqlstate(exc: IntegrityError) -> str | None:
    """DBAPI 예외에서 SQLSTATE를 찾습니다 (asyncpg/psycopg)."""
    orig: Any = exc.orig
    for candidate in (orig, getattr(orig, "__cause__", None)):
        code = getattr(candidate, "sqlstate", None) or getattr(candidate, "pgcode", None)
        if code:
            return str(code)
    return None


def _unique_fields(message: str) -> list[str]:
    """고유 제약 위반 메시지에서 컬럼 이름을 추출합니다."""
    match = _PG_KEY_PATTERN.search(message)
    if match:
        return [col.strip() for col in match.group(1).split(",")]
    match = _SQLITE_UNIQUE_PATTERN.search(message)
    if match:
        return [col.strip().split(".")[-1] for col in match.group(1).split(",")]
    return ["unknown"]


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """요청 검증 실패 → 400, 필드당 하나의 오류 항목.

    Request validation failure → 400 with exactly one entry per invalid field.
    """
    errors: list[dict[str, str]] = []
    seen: set[str] = set()
    for error in exc.errors():
        # JSON 파싱 실패는 위치가 문자 오프셋이므로 본문 전체로 보고
        if error.get("type") == "json_invalid":
            field: str = "body"
        else:
            field = _field_from_loc(error.get("loc", ()))
        if field in seen:
            continue
        seen.add(field)
        errors.append({"field": field, "message": _validation_message(error)})

    logger.info("request_validation_failed", path=request.url.path, fields=sorted(seen))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body("Validation errors", errors=errors),
    )


async def model_validation_exception_handler(request: Request, exc: ModelValidationError) -> JSONResponse:
    """ORM 모델 검증 실패 → 400."""
    logger.info("model_validation_failed", path=request.url.path, field=exc.field)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body(
            "Validation error",
            errors=[{"field": exc.field, "message": exc.message}],
        ),
    )


async def integrity_exception_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    """DB 제약 위반 → 고유 409 / 외래 키 400.

    Database constraint violation. Unique → 409 with the clashing columns,
    foreign key → 400 with the driver message. Other integrity errors
    (e.g. NOT NULL) fall through to 500.
    """
    message: str = str(exc.orig)
    code: str | None = _sqlstate(exc)

    if code == _UNIQUE_VIOLATION or (code is None and "UNIQUE constraint failed" in message):
        fields: list[str] = _unique_fields(message)
        logger.info("unique_violation", path=request.url.path, fields=fields)
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content=_error_body(
                "Duplicate entry",
                errors=[{"field": f, "message": f"{f} already exists"} for f in fields],
            ),
        )

    if code == _FOREIGN_KEY_VIOLATION or (code is None and "FOREIGN KEY constraint failed" in message):
        logger.info("foreign_key_violation", path=request.url.path)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_error_body("Foreign key constraint violation", error=message),
        )

    return await unhandled_exception_handler(request, exc)


async def expired_token_handler(request: Request, exc: jwt.ExpiredSignatureError) -> JSONResponse:
    """만료 토큰 → 401 "Token expired"."""
    logger.info("token_rejected", path=request.url.path, reason="expired")
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content=_error_body("Token expired"),
        headers={"WWW-Authenticate": "Bearer"},
    )


async def invalid_token_handler(request: Request, exc: jwt.InvalidTokenError) -> JSONResponse:
    """위조/손상 토큰 → 401 "Invalid token"."""
    logger.info("token_rejected", path=request.url.path, reason="invalid", error=type(exc).__name__)
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content=_error_body("Invalid token"),
        headers={"WWW-Authenticate": "Bearer"},
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """상태 코드를 가진 오류 → 해당 상태의 봉투.

    Errors carrying a status code (our HTTPException subclasses and
    Starlette's own). A 404 raised before any route matched becomes
    "Route <path> not found".
    """
    message: str = str(exc.detail)
    if exc.status_code == status.HTTP_404_NOT_FOUND and "endpoint" not in request.scope:
        message = f"Route {request.url.path} not found"

    if exc.status_code >= 500:
        logger.error("http_error", path=request.url.path, status_code=exc.status_code, detail=message)
    else:
        logger.info("http_error", path=request.url.path, status_code=exc.status_code, detail=message)

    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(message),
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """알 수 없는 오류 → 500.

    Unrecognized error → 500. Production hides the message; the stack
    trace is only exposed in development.
    """
    logger.error("unhandled_error", path=request.url.path, exc_info=exc)

    if settings.is_production:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body("Internal server error"),
        )

    extra: dict[str, Any] = {}
    if settings.is_development:
        extra["stack"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(str(exc) or "Internal server error", **extra),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """앱에 모든 예외 핸들러를 등록합니다.

    Register every handler on the application. Starlette resolves handlers
    by walking the exception MRO, so ExpiredSignatureError wins over its
    parent InvalidTokenError.
    """
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(ModelValidationError, model_validation_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_exception_handler)
    app.add_exception_handler(jwt.ExpiredSignatureError, expired_token_handler)
    app.add_exception_handler(jwt.InvalidTokenError, invalid_token_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
