"""사용자 서비스 — 회원가입, 로그인, 사용자 조회 비즈니스 로직.

User Service — Business logic for registration, login and user lookup.
Login failures are deliberately indistinguishable: unknown email and
wrong password both raise the same UnauthorizedError.
"""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from product_api.models.user import ROLE_USER, User
from product_api.repositories.user_repository import user_repository
from product_api.schemas.user import LoginRequest, LoginResponse, RegisterRequest, UserResponse
from product_api.utils.exceptions import DuplicateError, NotFoundError, UnauthorizedError
from product_api.utils.jwt import create_access_token
from product_api.utils.logging import get_logger
from product_api.utils.password import hash_password, verify_password

logger = get_logger(__name__)


class UserService:
    """사용자 관련 비즈니스 로직을 처리하는 서비스.

    Service handling user account business logic.
    """

    def _to_response(self, user: User) -> UserResponse:
        """사용자 모델을 응답 스키마로 변환합니다 (비밀번호 제외).

        Convert a User model to a UserResponse; the password hash is never copied.
        """
        return UserResponse(
            id=str(user.id),
            email=user.email,
            name=user.name,
            role=user.role,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )

    def _build_jwt_payload(self, user: User) -> dict[str, str]:
        """JWT 토큰 페이로드를 생성합니다.

        Build the JWT payload: user id as "sub", plus email and role.
        """
        return {
            "sub": str(user.id),
            "email": user.email,
            "role": user.role,
        }

    async def create_user(
        self,
        db: AsyncSession,
        data: RegisterRequest,
    ) -> UserResponse:
        """새 사용자를 생성합니다.

        Register a new user with the default "user" role.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            data: 회원가입 요청 데이터 (Registration request data)

        Returns:
            UserResponse: 생성된 사용자 (Created user, without password)

        Raises:
            DuplicateError: 같은 이메일의 사용자가 이미 존재할 때
                            (When the email is already registered)
        """
        # 이메일 중복 확인 — 동시 요청은 unique 제약이 최종 방어
        # Check email uniqueness; concurrent inserts are caught by the unique constraint
        if await user_repository.exists(db, email=data.email):
            raise DuplicateError("User with this email already exists")

        user: User = await user_repository.create(
            db,
            {
                "email": data.email,
                "password_hash": hash_password(data.password),
                "name": data.name,
                "role": ROLE_USER,
            },
        )
        logger.info("user_registered", user_id=str(user.id))
        return self._to_response(user)

    async def login_user(
        self,
        db: AsyncSession,
        data: LoginRequest,
    ) -> LoginResponse:
        """로그인을 처리하고 액세스 토큰을 발급합니다.

        Authenticate by email/password and issue a signed access token.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            data: 로그인 요청 데이터 (Login request data)

        Returns:
            LoginResponse: 토큰과 사용자 정보 (Token and user profile)

        Raises:
            UnauthorizedError: 잘못된 인증 정보일 때 (Invalid credentials)
        """
        user: User | None = await user_repository.get_by_email(db, data.email)
        if user is None or not verify_password(data.password, user.password_hash):
            logger.warning("login_failed")
            raise UnauthorizedError("Invalid credentials")

        token: str = create_access_token(self._build_jwt_payload(user))
        return LoginResponse(token=token, user=self._to_response(user))

    async def get_user(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> UserResponse:
        """ID로 사용자를 조회합니다.

        Retrieve a user by id.

        Raises:
            NotFoundError: 사용자를 찾을 수 없을 때 (User not found)
        """
        user: User | None = await user_repository.get_by_id(db, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return self._to_response(user)

    async def list_users(self, db: AsyncSession) -> list[UserResponse]:
        """전체 사용자 목록을 최신 가입순으로 조회합니다.

        List every user, newest first.
        """
        users = await user_repository.list_all(db, User.created_at.desc())
        return [self._to_response(u) for u in users]


# 싱글턴 인스턴스 — Singleton instance
user_service: UserService = UserService()
