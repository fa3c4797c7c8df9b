"""사용자 라우터 — 회원가입, 로그인, 프로필 및 사용자 조회.

User Router — Registration, login, profile and user lookup endpoints.
register/login are public; the rest require a bearer token.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from product_api.api.deps import get_current_user, json_body, require_admin
from product_api.database import get_db
from product_api.models.user import User
from product_api.schemas.common import DataResponse, ListResponse
from product_api.schemas.user import LoginRequest, LoginResponse, RegisterRequest, UserResponse
from product_api.services.user_service import user_service

router: APIRouter = APIRouter()


@router.post("/register", response_model=DataResponse[UserResponse], status_code=201)
async def register(
    data: Annotated[RegisterRequest, Depends(json_body(RegisterRequest))],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> DataResponse[UserResponse]:
    """회원가입 — 기본 "user" 역할로 생성.

    Register a new account.
    """
    user: UserResponse = await user_service.create_user(db, data)
    await db.commit()
    return DataResponse(message="User registered successfully", data=user)


@router.post("/login", response_model=DataResponse[LoginResponse])
async def login(
    data: Annotated[LoginRequest, Depends(json_body(LoginRequest))],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> DataResponse[LoginResponse]:
    """로그인 — 액세스 토큰 발급.

    Exchange email/password for a signed access token.
    """
    result: LoginResponse = await user_service.login_user(db, data)
    return DataResponse(message="Login successful", data=result)


@router.get("/profile", response_model=DataResponse[UserResponse])
async def get_profile(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> DataResponse[UserResponse]:
    """현재 사용자 프로필 조회."""
    user: UserResponse = await user_service.get_user(db, current_user.id)
    return DataResponse(message="Profile retrieved successfully", data=user)


@router.get("", response_model=ListResponse[UserResponse])
async def list_users(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> ListResponse[UserResponse]:
    """전체 사용자 목록 조회. Admin만 가능.

    List all users, newest first. Admin only.
    """
    users: list[UserResponse] = await user_service.list_users(db)
    return ListResponse(count=len(users), data=users)


@router.get("/{user_id}", response_model=DataResponse[UserResponse])
async def get_user(
    user_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> DataResponse[UserResponse]:
    """사용자 단건 조회."""
    user: UserResponse = await user_service.get_user(db, user_id)
    return DataResponse(message="User retrieved successfully", data=user)
