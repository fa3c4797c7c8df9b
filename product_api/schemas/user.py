"""사용자/인증 관련 Pydantic 요청/응답 스키마 정의.

User and authentication Pydantic request/response schema definitions.
Request validators run in "before" mode with validate_default so that a
missing, mistyped or malformed field yields exactly one message per field.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from product_api.models.user import EMAIL_MAX_LENGTH, NAME_MAX_LENGTH
from product_api.schemas.common import CamelModel

# 비밀번호/이름 최소 길이 — Minimum lengths
PASSWORD_MIN_LENGTH: int = 6
NAME_MIN_LENGTH: int = 2


class RegisterRequest(BaseModel):
    """회원가입 요청 스키마.

    Registration request schema. Creates a user with the default "user" role.

    Attributes:
        email: 이메일 (Must contain "@", at most 255 characters)
        password: 비밀번호 (Plain text, at least 6 characters, bcrypt-hashed on server)
        name: 표시 이름 (2..100 characters after trimming)
    """

    model_config = ConfigDict(validate_default=True)

    email: str | None = None
    password: str | None = None
    name: str | None = None

    @field_validator("email", mode="before")
    @classmethod
    def check_email(cls, value: Any) -> str:
        if not isinstance(value, str) or "@" not in value:
            raise ValueError("Valid email is required")
        if len(value.strip()) > EMAIL_MAX_LENGTH:
            raise ValueError(f"Email must be at most {EMAIL_MAX_LENGTH} characters")
        return value.strip()

    @field_validator("password", mode="before")
    @classmethod
    def check_password(cls, value: Any) -> str:
        if not isinstance(value, str) or len(value) < PASSWORD_MIN_LENGTH:
            raise ValueError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")
        return value

    @field_validator("name", mode="before")
    @classmethod
    def check_name(cls, value: Any) -> str:
        if not isinstance(value, str) or len(value.strip()) < NAME_MIN_LENGTH:
            raise ValueError(f"Name must be at least {NAME_MIN_LENGTH} characters")
        if len(value.strip()) > NAME_MAX_LENGTH:
            raise ValueError(f"Name must be at most {NAME_MAX_LENGTH} characters")
        return value.strip()


class LoginRequest(BaseModel):
    """로그인 요청 스키마.

    Login request schema. Credentials are checked against the bcrypt hash.
    """

    model_config = ConfigDict(validate_default=True)

    email: str | None = None
    password: str | None = None

    @field_validator("email", mode="before")
    @classmethod
    def check_email(cls, value: Any) -> str:
        if not isinstance(value, str) or not value:
            raise ValueError("Email is required")
        return value.strip()

    @field_validator("password", mode="before")
    @classmethod
    def check_password(cls, value: Any) -> str:
        if not isinstance(value, str) or not value:
            raise ValueError("Password is required")
        return value


class UserResponse(CamelModel):
    """사용자 응답 스키마 — 비밀번호 제외.

    User response schema. Never includes the password hash.
    """

    id: str
    email: str
    name: str
    role: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class UserSummary(CamelModel):
    """상품 응답에 포함되는 소유자 요약.

    Owner summary embedded in product responses.
    """

    id: str
    name: str
    email: str


class LoginResponse(CamelModel):
    """로그인 성공 응답 데이터.

    Login payload: the signed access token plus the user profile.

    Attributes:
        token: JWT 액세스 토큰 (Signed access token, default TTL 7 days)
        token_type: 토큰 유형 (Always "bearer")
        user: 사용자 정보 (Authenticated user)
    """

    token: str
    token_type: str = "bearer"
    user: UserResponse
