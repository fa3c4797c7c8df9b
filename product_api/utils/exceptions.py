"""애플리케이션 예외.

Status-carrying HTTPException subclasses raised by services and
dependencies, plus the validation error raised by ORM model hooks. The
handlers in product_api.middleware.error_handler render all of them as the
JSON error envelope.

Usage:
    raise NotFoundError("Product not found")
    raise ForbiddenError("Not authorized to update this product")
"""

from fastapi import HTTPException, status


class NotFoundError(HTTPException):
    """404 — 사용자/상품이 없음 (User or product does not exist)."""

    def __init__(self, detail: str = "Resource not found") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class DuplicateError(HTTPException):
    """409 — 이미 존재하는 값으로 생성 시도 (e.g. an email that is already registered)."""

    def __init__(self, detail: str = "Resource already exists") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class ForbiddenError(HTTPException):
    """403 — 인증은 되었으나 권한 없음.

    The caller is authenticated but may not act on the resource: a
    non-owner editing a product, or a non-admin listing users.
    """

    def __init__(self, detail: str = "Insufficient permissions") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class UnauthorizedError(HTTPException):
    """401 — 인증 실패. WWW-Authenticate: Bearer 헤더 포함."""

    def __init__(self, detail: str = "Authentication required") -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class ModelValidationError(ValueError):
    """ORM @validates 훅의 제약 위반.

    Raised when a model attribute is assigned a value that breaks a model
    constraint. Rendered as 400 "Validation error" with one entry for the field.

    Attributes:
        field: 위반한 속성 이름 (Offending attribute)
        message: 오류 메시지 (Human readable message)
    """

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field: str = field
        self.message: str = message
