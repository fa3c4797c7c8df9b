"""사용자 레포지토리 — 사용자 CRUD 및 이메일 조회 쿼리.

User Repository — CRUD and lookup queries for users.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from product_api.models.user import User
from product_api.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """사용자 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the users table.
    """

    def __init__(self) -> None:
        super().__init__(User)

    async def get_by_email(
        self,
        db: AsyncSession,
        email: str,
    ) -> User | None:
        """이메일로 사용자를 조회합니다.

        Retrieve a user by login email (exact match).

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            email: 로그인 이메일 (Login email)

        Returns:
            User | None: 사용자 또는 None (User or None)
        """
        result = await db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()


# 싱글턴 인스턴스 — Singleton instance
user_repository: UserRepository = UserRepository()
