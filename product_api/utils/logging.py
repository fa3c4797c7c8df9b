"""structlog 기반 애플리케이션 로깅 설정.

In-process structured logging for services, the error handler and the seed
script. Request/response traffic goes to Axiom through the middleware; these
lines go to stdout as JSON.

    {"event": "product_created", "service": "Product API",
     "environment": "production", "level": "info", ...}

운영 환경에서는 예외 프레임의 지역 변수를 출력하지 않음 (비밀번호, 토큰 노출 방지).
"""

import logging
import sys
from typing import Any

import structlog
from structlog.tracebacks import ExceptionDictTransformer
from structlog.typing import Processor

from product_api.config import Settings


def _bind_static(**fields: str) -> Processor:
    """모든 로그 이벤트에 고정 필드를 추가하는 프로세서."""

    def processor(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        for key, value in fields.items():
            event_dict.setdefault(key, value)
        return event_dict

    return processor


def build_processors(*, service: str, environment: str, production: bool) -> list[Processor]:
    """structlog 프로세서 체인을 구성합니다.

    Tracebacks are rendered as dicts either way; frame locals are only kept
    outside production.
    """
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _bind_static(service=service, environment=environment),
        structlog.processors.ExceptionRenderer(
            ExceptionDictTransformer(show_locals=not production)
        ),
        structlog.processors.JSONRenderer(),
    ]


def configure_logging(app_settings: Settings) -> None:
    """설정 값으로 JSON 구조화 로그를 초기화합니다.

    Args:
        app_settings: APP_NAME, ENVIRONMENT, LOG_LEVEL을 읽을 설정 객체
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, app_settings.LOG_LEVEL.upper(), logging.INFO),
    )

    structlog.configure(
        processors=build_processors(
            service=app_settings.APP_NAME,
            environment=app_settings.ENVIRONMENT,
            production=app_settings.is_production,
        ),
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
