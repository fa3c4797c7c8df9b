"""상품 레포지토리 — 상품 CRUD 및 필터 조회 쿼리.

Product Repository — CRUD and filtered listing queries for products.
Listing and detail queries eager-load the owning user so responses can
embed the owner summary without lazy loads on the async session.
"""

from decimal import Decimal
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from product_api.models.product import Product
from product_api.repositories.base import BaseRepository


class ProductRepository(BaseRepository[Product]):
    """상품 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the products table.
    """

    def __init__(self) -> None:
        super().__init__(Product)

    async def get_filtered(
        self,
        db: AsyncSession,
        user_id: UUID | None = None,
        min_price: Decimal | None = None,
        max_price: Decimal | None = None,
    ) -> list[Product]:
        """필터 조건으로 상품 목록을 조회합니다.

        Retrieve products, newest first, with the owner eagerly loaded.
        Price bounds are inclusive and independent of each other.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 소유자 필터 (Owner filter)
            min_price: 최소 가격, 이상 (Inclusive lower price bound)
            max_price: 최대 가격, 이하 (Inclusive upper price bound)

        Returns:
            list[Product]: 상품 목록 (List of products)
        """
        # 세션에 이미 있는 객체도 소유자까지 다시 채움
        query: Select = (
            select(Product)
            .options(selectinload(Product.user))
            .execution_options(populate_existing=True)
        )

        if user_id is not None:
            query = query.where(Product.user_id == user_id)
        if min_price is not None:
            query = query.where(Product.price >= min_price)
        if max_price is not None:
            query = query.where(Product.price <= max_price)

        query = query.order_by(Product.created_at.desc())
        result = await db.execute(query)
        return list(result.scalars().all())

    async def get_detail(
        self,
        db: AsyncSession,
        product_id: UUID,
    ) -> Product | None:
        """상품 상세 정보를 소유자와 함께 조회합니다.

        Retrieve a product with its owner eagerly loaded.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            product_id: 상품 ID (Product UUID)

        Returns:
            Product | None: 소유자가 로드된 상품 또는 None
                            (Product with owner loaded, or None)
        """
        query: Select = (
            select(Product)
            .options(selectinload(Product.user))
            .where(Product.id == product_id)
            .execution_options(populate_existing=True)
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()


# 싱글턴 인스턴스 — Singleton instance
product_repository: ProductRepository = ProductRepository()
