"""공통 응답 봉투(envelope) 스키마 정의.

Common response envelope schema definitions.
Every endpoint answers with {success, message, data} (lists add count);
errors use {success: false, message, errors} built by the error handler.
"""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """camelCase JSON 키를 사용하는 응답 모델 베이스.

    Base for response models. Serializes fields with camelCase aliases
    (user_id → userId) while Python code keeps snake_case names.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FieldError(BaseModel):
    """필드 단위 오류 항목.

    One per-field error entry in a 400/409 error envelope.

    Attributes:
        field: 오류 필드 이름 (Offending field name)
        message: 오류 메시지 (Human readable message)
    """

    field: str
    message: str


class DataResponse(CamelModel, Generic[T]):
    """단일 데이터 응답 봉투.

    Envelope for a single resource. Every endpoint states what it did in
    message, so the key is never null.
    """

    success: bool = True
    message: str
    data: T


class ListResponse(CamelModel, Generic[T]):
    """목록 응답 봉투 — 항목 수 포함.

    Envelope for collections; count equals len(data).
    """

    success: bool = True
    count: int
    data: list[T]


class MessageResponse(CamelModel):
    """메시지 전용 응답 (예: 삭제 완료).

    Envelope carrying only a message, e.g. after a delete.
    """

    success: bool = True
    message: str


class ErrorResponse(CamelModel):
    """오류 응답 봉투 — OpenAPI 문서용.

    Error envelope, declared for the OpenAPI document.
    The handlers in product_api.middleware.error_handler produce this shape.
    """

    success: bool = False
    message: str
    errors: list[FieldError] | None = None
