"""인증/권한 의존성.

Bearer-token authentication, role checks and request-body parsing shared
by the routers.

    Authorization: Bearer <token>
      → 헤더 없음: 401 "Access token required"
      → decode_token: 만료/위조는 PyJWT 예외로 전파, 오류 핸들러가 401로 변환
      → type != "access" 또는 sub 불량: 401
      → sub의 사용자가 삭제됨: 401 "User no longer exists"
"""

from typing import Annotated, Awaitable, Callable, TypeVar
from uuid import UUID

from fastapi import Body, Depends
from fastapi.exceptions import RequestValidationError
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel, ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from product_api.database import get_db
from product_api.models.user import ROLE_ADMIN, User
from product_api.repositories.user_repository import user_repository
from product_api.utils.exceptions import ForbiddenError, UnauthorizedError
from product_api.utils.jwt import decode_token

# auto_error=False — 헤더 누락을 FastAPI 기본 403 대신 401로 응답
bearer_scheme: HTTPBearer = HTTPBearer(auto_error=False)

BodyT = TypeVar("BodyT", bound=BaseModel)


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """요청한 사용자를 반환합니다.

    Resolve the bearer token to the requesting user.

    Raises:
        UnauthorizedError: 토큰 누락, 잘못된 타입/페이로드, 사용자 없음
        jwt.ExpiredSignatureError, jwt.InvalidTokenError: 만료/위조 토큰
    """
    if credentials is None:
        raise UnauthorizedError("Access token required")

    claims: dict = decode_token(credentials.credentials)
    if claims.get("type") != "access":
        raise UnauthorizedError("Invalid token type")

    try:
        user_id = UUID(str(claims["sub"]))
    except (KeyError, ValueError):
        raise UnauthorizedError("Invalid token payload")

    user: User | None = await user_repository.get_by_id(db, user_id)
    if user is None:
        raise UnauthorizedError("User no longer exists")
    return user


def require_role(*roles: str) -> Callable[..., Awaitable[User]]:
    """지정한 역할 중 하나를 가진 사용자만 통과시키는 의존성을 만듭니다.

    Example:
        current_user: Annotated[User, Depends(require_role("admin"))]
    """

    async def _check(current_user: Annotated[User, Depends(get_current_user)]) -> User:
        if current_user.role not in roles:
            raise ForbiddenError("Insufficient permissions")
        return current_user

    return _check


require_admin = require_role(ROLE_ADMIN)


def json_body(model: type[BodyT]) -> Callable[..., Awaitable[BodyT]]:
    """요청 본문을 model로 검증하는 의존성을 만듭니다.

    A request without a body is validated as an empty object, so the client
    gets one error per required field instead of a single "body" entry.

    Example:
        data: Annotated[RegisterRequest, Depends(json_body(RegisterRequest))]
    """

    async def _parse(payload: Annotated[model | None, Body()] = None) -> BodyT:
        if payload is not None:
            return payload
        try:
            return model.model_validate({})
        except ValidationError as exc:
            raise RequestValidationError(exc.errors(include_url=False), body=None)

    return _parse
