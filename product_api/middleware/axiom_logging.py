"""Axiom 요청 로깅 미들웨어.

Ships one structured event per API request to Axiom: method, path, masked
query/body, status code, duration and, for 4xx/5xx responses, the
"message" field of the error envelope. Disabled while AXIOM_API_TOKEN or
AXIOM_DATASET is empty.
"""

import json
import re
import time
from typing import Any

from axiom_py import Client as AxiomClient
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from product_api.config import settings
from product_api.utils.logging import get_logger

logger = get_logger(__name__)

# 값을 가릴 키 — Keys whose values are replaced with "***"
_SENSITIVE_KEYS = re.compile(
    r"(password|passwd|secret|token|authorization|api_key|apikey|credential)",
    re.IGNORECASE,
)

_SKIP_PATHS = {"/health", "/docs", "/redoc", "/openapi.json"}

_MAX_ERROR_LEN: int = 500
_MAX_LIST_ITEMS: int = 20
_MAX_DEPTH: int = 5


def mask_sensitive(data: Any, depth: int = 0) -> Any:
    """중첩된 dict/list에서 민감한 값을 가립니다.

    Recursively replace values under sensitive keys. Lists are cut to their
    first items and nesting deeper than a few levels is elided.
    """
    if depth > _MAX_DEPTH:
        return "..."
    if isinstance(data, dict):
        masked: dict[str, Any] = {}
        for key, value in data.items():
            if _SENSITIVE_KEYS.search(str(key)):
                masked[key] = "***"
            else:
                masked[key] = mask_sensitive(value, depth + 1)
        return masked
    if isinstance(data, list):
        return [mask_sensitive(item, depth + 1) for item in data[:_MAX_LIST_ITEMS]]
    return data


def extract_error_message(body: bytes) -> str:
    """오류 봉투의 message를 꺼냅니다. JSON이 아니면 원문 사용."""
    try:
        parsed = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        message = body.decode("utf-8", errors="replace")
    else:
        message = str(parsed.get("message", parsed)) if isinstance(parsed, dict) else str(parsed)

    if len(message) > _MAX_ERROR_LEN:
        return message[:_MAX_ERROR_LEN] + "..."
    return message


async def _read_json_body(request: Request) -> Any:
    if request.method not in ("POST", "PUT", "PATCH"):
        return None
    raw: bytes = await request.body()
    if not raw:
        return None
    try:
        return mask_sensitive(json.loads(raw))
    except (json.JSONDecodeError, UnicodeDecodeError):
        return "(non-json body)"


async def _buffer_error_response(response: Response) -> tuple[Response, str]:
    """스트리밍 응답을 소비해 message를 읽고 같은 응답을 다시 만듭니다.

    Drain a streamed error response, read its envelope message and return an
    equivalent buffered response.
    """
    content = b""
    async for chunk in response.body_iterator:
        content += chunk if isinstance(chunk, bytes) else chunk.encode("utf-8")

    buffered = Response(
        content=content,
        status_code=response.status_code,
        headers=dict(response.headers),
        media_type=response.media_type,
    )
    return buffered, extract_error_message(content)


class AxiomLoggingMiddleware(BaseHTTPMiddleware):
    """요청마다 Axiom 이벤트를 하나씩 전송하는 미들웨어."""

    def __init__(self, app: Any) -> None:
        super().__init__(app)
        self._dataset: str = settings.AXIOM_DATASET
        self._client: AxiomClient | None = None
        if settings.AXIOM_API_TOKEN and settings.AXIOM_DATASET:
            self._client = AxiomClient(token=settings.AXIOM_API_TOKEN)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if self._client is None or request.url.path in _SKIP_PATHS:
            return await call_next(request)

        started: float = time.time()
        body: Any = await _read_json_body(request)
        status_code: int = 500
        error: str | None = None

        try:
            response = await call_next(request)
            status_code = response.status_code
            if status_code >= 400:
                response, error = await _buffer_error_response(response)
        except Exception as exc:
            error = f"{type(exc).__name__}: {str(exc)[:300]}"
            raise
        finally:
            event = self._build_event(request, body, status_code, started, error)
            self._ship(event)

        return response

    def _build_event(
        self,
        request: Request,
        body: Any,
        status_code: int,
        started: float,
        error: str | None,
    ) -> dict[str, Any]:
        event: dict[str, Any] = {
            "service": settings.APP_NAME,
            "method": request.method,
            "path": request.url.path,
            "status_code": status_code,
            "duration_ms": round((time.time() - started) * 1000, 2),
        }
        if request.query_params:
            event["query_params"] = mask_sensitive(dict(request.query_params))
        if request.path_params:
            event["path_params"] = dict(request.path_params)
        if body is not None:
            event["request_body"] = body
        if error:
            event["error"] = error
        return event

    def _ship(self, event: dict[str, Any]) -> None:
        # 전송 실패는 요청 결과에 영향 없음 — A failed ingest never fails the request
        try:
            self._client.ingest_events(self._dataset, [event])
        except Exception as exc:
            logger.warning("axiom_ingest_failed", error=str(exc))
