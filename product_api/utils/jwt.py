"""액세스 토큰 발급/검증.

Signs and verifies the HS256 access tokens handed out by login.

Payload:
    sub   — 사용자 UUID 문자열 (User id)
    email — 로그인 이메일 (Login email)
    role  — "user" | "admin"
    type  — 항상 "access" (Always "access")
    exp   — 만료 시각 (Expiry, default now + 7 days)
"""

from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from product_api.config import settings


def create_access_token(data: dict[str, Any], expires_delta: timedelta | None = None) -> str:
    """페이로드에 exp/type을 더해 서명된 토큰을 만듭니다.

    Args:
        data: sub/email/role 클레임 (Claims to embed)
        expires_delta: 수명 재정의, 기본은 JWT_ACCESS_TOKEN_EXPIRE_MINUTES
                       (Lifetime override; negative values mint already-expired tokens)

    Returns:
        str: 인코딩된 JWT (Encoded token)
    """
    lifetime: timedelta = expires_delta if expires_delta is not None else timedelta(
        minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES
    )
    claims: dict[str, Any] = {
        **data,
        "exp": datetime.now(timezone.utc) + lifetime,
        "type": "access",
    }
    return jwt.encode(claims, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> dict[str, Any]:
    """서명과 만료를 검증하고 클레임을 반환합니다.

    PyJWT errors are left to propagate: ExpiredSignatureError becomes
    "Token expired" and any other InvalidTokenError "Invalid token" in the
    error handler.
    """
    return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
