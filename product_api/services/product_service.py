"""상품 서비스 — 상품 CRUD 및 소유권 검사 비즈니스 로직.

Product Service — Business logic for product CRUD.
Only the owning user may update or delete a product; everyone
authenticated may read.
"""

from decimal import Decimal
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from product_api.models.product import Product
from product_api.repositories.product_repository import product_repository
from product_api.schemas.product import ProductCreate, ProductResponse, ProductUpdate
from product_api.schemas.user import UserSummary
from product_api.utils.exceptions import ForbiddenError, NotFoundError
from product_api.utils.logging import get_logger

logger = get_logger(__name__)


class ProductService:
    """상품 관련 비즈니스 로직을 처리하는 서비스.

    Service handling product business logic.
    """

    def _to_response(self, product: Product) -> ProductResponse:
        """상품 모델을 응답 스키마로 변환합니다.

        Convert a Product model (owner loaded) to a ProductResponse.
        """
        return ProductResponse(
            id=str(product.id),
            name=product.name,
            description=product.description,
            price=float(product.price),
            stock=product.stock,
            user_id=str(product.user_id),
            created_at=product.created_at,
            updated_at=product.updated_at,
            user=UserSummary(
                id=str(product.user.id),
                name=product.user.name,
                email=product.user.email,
            ),
        )

    async def _get_owned(
        self,
        db: AsyncSession,
        product_id: UUID,
        user_id: UUID,
        action: str,
    ) -> Product:
        """상품을 조회하고 요청자가 소유자인지 확인합니다.

        Load a product and verify the requester owns it.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            product_id: 상품 ID (Product UUID)
            user_id: 요청자 ID (Requesting user UUID)
            action: 오류 메시지에 쓰일 동작 이름 ("update" | "delete")

        Raises:
            NotFoundError: 상품을 찾을 수 없을 때 (Product not found)
            ForbiddenError: 요청자가 소유자가 아닐 때 (Requester is not the owner)
        """
        product: Product | None = await product_repository.get_detail(db, product_id)
        if product is None:
            raise NotFoundError("Product not found")
        if product.user_id != user_id:
            logger.warning(
                "product_ownership_denied",
                product_id=str(product_id),
                user_id=str(user_id),
                action=action,
            )
            raise ForbiddenError(f"Not authorized to {action} this product")
        return product

    async def create_product(
        self,
        db: AsyncSession,
        data: ProductCreate,
        user_id: UUID,
    ) -> ProductResponse:
        """새 상품을 생성합니다. 요청자가 소유자가 됩니다.

        Create a product owned by the requesting user.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            data: 상품 생성 데이터 (Product creation data)
            user_id: 소유자가 될 사용자 ID (Requesting user UUID)

        Returns:
            ProductResponse: 생성된 상품 (Created product with owner)
        """
        product: Product = await product_repository.create(
            db,
            {
                "name": data.name,
                "description": data.description,
                "price": data.price,
                "stock": data.stock,
                "user_id": user_id,
            },
        )
        # 소유자 포함 재조회 — Reload with the owner eager-loaded
        return await self.get_product(db, product.id)

    async def list_products(
        self,
        db: AsyncSession,
        user_id: UUID | None = None,
        min_price: Decimal | None = None,
        max_price: Decimal | None = None,
    ) -> list[ProductResponse]:
        """필터 조건으로 상품 목록을 조회합니다.

        List products, newest first, optionally filtered by owner and an
        inclusive price range.
        """
        products: list[Product] = await product_repository.get_filtered(
            db, user_id=user_id, min_price=min_price, max_price=max_price
        )
        return [self._to_response(p) for p in products]

    async def get_product(
        self,
        db: AsyncSession,
        product_id: UUID,
    ) -> ProductResponse:
        """상품 상세 정보를 조회합니다.

        Retrieve a product with its owner.

        Raises:
            NotFoundError: 상품을 찾을 수 없을 때 (Product not found)
        """
        product: Product | None = await product_repository.get_detail(db, product_id)
        if product is None:
            raise NotFoundError("Product not found")
        return self._to_response(product)

    async def update_product(
        self,
        db: AsyncSession,
        product_id: UUID,
        data: ProductUpdate,
        user_id: UUID,
    ) -> ProductResponse:
        """상품 정보를 수정합니다. 소유자만 가능.

        Partially update a product. Owner only.

        Raises:
            NotFoundError: 상품을 찾을 수 없을 때 (Product not found)
            ForbiddenError: 요청자가 소유자가 아닐 때 (Requester is not the owner)
        """
        product: Product = await self._get_owned(db, product_id, user_id, "update")

        update_data: dict = data.model_dump(exclude_unset=True)
        await product_repository.update(db, product, update_data)

        return await self.get_product(db, product_id)

    async def delete_product(
        self,
        db: AsyncSession,
        product_id: UUID,
        user_id: UUID,
    ) -> str:
        """상품을 삭제합니다. 소유자만 가능.

        Delete a product. Owner only.

        Returns:
            str: 완료 메시지 (Confirmation message)

        Raises:
            NotFoundError: 상품을 찾을 수 없을 때 (Product not found)
            ForbiddenError: 요청자가 소유자가 아닐 때 (Requester is not the owner)
        """
        product: Product = await self._get_owned(db, product_id, user_id, "delete")
        await product_repository.delete(db, product)
        logger.info("product_deleted", product_id=str(product_id), user_id=str(user_id))
        return "Product deleted successfully"


# 싱글턴 인스턴스 — Singleton instance
product_service: ProductService = ProductService()
