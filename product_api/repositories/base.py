"""공통 레포지토리 — 도메인 레포지토리가 상속하는 제네릭 베이스.

Shared repository base. Domain repositories subclass it for the primary-key
lookup and write helpers and add their own query methods on top.
Writes only flush; the router that owns the request commits.

Usage:
    class ProductRepository(BaseRepository[Product]):
        def __init__(self) -> None:
            super().__init__(Product)
"""

from typing import Any, Generic, Sequence, TypeVar
from uuid import UUID

from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from product_api.database import Base

# 레포지토리가 다루는 ORM 모델 타입 — ORM model handled by a repository
ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """모델 하나에 묶인 제네릭 레포지토리.

    Generic repository bound to one mapped model.

    Attributes:
        model: 대상 ORM 모델 클래스 (Mapped model class)
    """

    def __init__(self, model: type[ModelType]) -> None:
        self.model: type[ModelType] = model

    async def get_by_id(self, db: AsyncSession, record_id: UUID) -> ModelType | None:
        """기본 키로 레코드를 찾습니다. 없으면 None."""
        return await db.get(self.model, record_id)

    async def list_all(
        self,
        db: AsyncSession,
        *order_by: Any,
    ) -> Sequence[ModelType]:
        """모든 레코드를 주어진 정렬 순서로 반환합니다.

        Return every row of the table, ordered by the given clauses
        (e.g. ``User.created_at.desc()``).
        """
        result = await db.execute(select(self.model).order_by(*order_by))
        return result.scalars().all()

    async def exists(self, db: AsyncSession, **criteria: Any) -> bool:
        """컬럼 값이 모두 일치하는 레코드가 있는지 확인합니다.

        True when at least one row matches every column=value pair.

        Example:
            await user_repository.exists(db, email="a@example.com")
        """
        clauses = [getattr(self.model, column) == value for column, value in criteria.items()]
        return bool(await db.scalar(select(exists().where(*clauses))))

    async def create(self, db: AsyncSession, values: dict[str, Any]) -> ModelType:
        """레코드를 추가하고 flush 합니다.

        Insert a row and flush so generated columns (id, timestamps) are
        available. Model validators run on construction; constraint violations
        surface here as sqlalchemy.exc.IntegrityError.

        Args:
            db: 요청 범위 세션 (Request-scoped session)
            values: 컬럼 이름 → 값 (Column values)

        Returns:
            ModelType: 새로 고친 인스턴스 (The refreshed new instance)
        """
        instance: ModelType = self.model(**values)
        db.add(instance)
        await db.flush()
        await db.refresh(instance)
        return instance

    async def update(
        self,
        db: AsyncSession,
        instance: ModelType,
        changes: dict[str, Any],
    ) -> ModelType:
        """로드된 인스턴스에 변경 사항을 적용합니다.

        Apply changes to an instance the caller already loaded (and checked).
        Keys that are not mapped attributes of the model are ignored.
        """
        for column, value in changes.items():
            if column in self.model.__mapper__.attrs:
                setattr(instance, column, value)

        await db.flush()
        await db.refresh(instance)
        return instance

    async def delete(self, db: AsyncSession, instance: ModelType) -> None:
        await db.delete(instance)
        await db.flush()
