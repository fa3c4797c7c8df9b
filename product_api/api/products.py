"""상품 라우터 — 상품 CRUD 엔드포인트.

Product Router — CRUD endpoints for products.
Every endpoint requires a bearer token.

Permission Matrix:
    - 상품 등록/목록/상세 조회: 인증된 모든 사용자 (any authenticated user)
    - 상품 수정/삭제: 소유자만 (owner only, checked in product_service)
"""

from decimal import Decimal
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from product_api.api.deps import get_current_user, json_body
from product_api.database import get_db
from product_api.models.user import User
from product_api.schemas.common import DataResponse, ListResponse, MessageResponse
from product_api.schemas.product import ProductCreate, ProductResponse, ProductUpdate
from product_api.services.product_service import product_service

router: APIRouter = APIRouter()


@router.post("", response_model=DataResponse[ProductResponse], status_code=201)
async def create_product(
    data: Annotated[ProductCreate, Depends(json_body(ProductCreate))],
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> DataResponse[ProductResponse]:
    """새 상품을 등록합니다. 요청자가 소유자가 됩니다.

    Create a product owned by the requester.
    """
    result: ProductResponse = await product_service.create_product(db, data, current_user.id)
    await db.commit()
    return DataResponse(message="Product created successfully", data=result)


@router.get("", response_model=ListResponse[ProductResponse])
async def list_products(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    user_id: Annotated[UUID | None, Query(alias="userId")] = None,
    min_price: Annotated[Decimal | None, Query(alias="minPrice", ge=0)] = None,
    max_price: Annotated[Decimal | None, Query(alias="maxPrice", ge=0)] = None,
) -> ListResponse[ProductResponse]:
    """상품 목록을 조회합니다 (소유자/가격 범위 필터).

    List products. minPrice/maxPrice are inclusive bounds.
    """
    products: list[ProductResponse] = await product_service.list_products(
        db, user_id=user_id, min_price=min_price, max_price=max_price
    )
    return ListResponse(count=len(products), data=products)


@router.get("/{product_id}", response_model=DataResponse[ProductResponse])
async def get_product(
    product_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> DataResponse[ProductResponse]:
    """상품 상세 정보를 조회합니다 (소유자 요약 포함)."""
    result: ProductResponse = await product_service.get_product(db, product_id)
    return DataResponse(message="Product retrieved successfully", data=result)


@router.put("/{product_id}", response_model=DataResponse[ProductResponse])
async def update_product(
    product_id: UUID,
    data: Annotated[ProductUpdate, Depends(json_body(ProductUpdate))],
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> DataResponse[ProductResponse]:
    """상품 정보를 수정합니다. 소유자만 가능.

    Partially update a product. Owner only.
    """
    result: ProductResponse = await product_service.update_product(
        db, product_id, data, current_user.id
    )
    await db.commit()
    return DataResponse(message="Product updated successfully", data=result)


@router.delete("/{product_id}", response_model=MessageResponse)
async def delete_product(
    product_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> MessageResponse:
    """상품을 삭제합니다. 소유자만 가능.

    Delete a product. Owner only.
    """
    message: str = await product_service.delete_product(db, product_id, current_user.id)
    await db.commit()
    return MessageResponse(message=message)
