"""상품 관련 Pydantic 요청/응답 스키마 정의.

Product-related Pydantic request/response schema definitions.
Create requires name and price; update is partial (exclude_unset) and
cannot change the owner.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from product_api.models.product import NAME_MAX_LENGTH, NAME_MIN_LENGTH, STOCK_MAX
from product_api.schemas.common import CamelModel
from product_api.schemas.user import UserSummary

# NUMERIC(10,2) 상한 — Upper bound of a NUMERIC(10,2) column
PRICE_LIMIT: Decimal = Decimal("100000000")


class ProductFields(BaseModel):
    """상품 요청 필드 및 검증 규칙 공통 베이스.

    Shared product request fields and their "before" validators.
    Subclasses decide which fields are required by toggling validate_default.
    """

    name: str | None = None
    description: str | None = None
    price: Decimal | None = None
    stock: int | None = None

    @field_validator("name", mode="before")
    @classmethod
    def check_name(cls, value: Any) -> str:
        if not isinstance(value, str) or not NAME_MIN_LENGTH <= len(value.strip()) <= NAME_MAX_LENGTH:
            raise ValueError(
                f"Name must be between {NAME_MIN_LENGTH} and {NAME_MAX_LENGTH} characters"
            )
        return value.strip()

    @field_validator("description", mode="before")
    @classmethod
    def check_description(cls, value: Any) -> str | None:
        if value is not None and not isinstance(value, str):
            raise ValueError("Description must be a string")
        return value

    @field_validator("price", mode="before")
    @classmethod
    def check_price(cls, value: Any) -> Decimal:
        # bool은 int의 하위 타입이므로 명시적으로 거부 (bool is an int subclass)
        if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)) or value < 0:
            raise ValueError("Price must be a non-negative number")
        price: Decimal = Decimal(str(value))
        if not price.is_finite() or price >= PRICE_LIMIT:
            raise ValueError(f"Price must be less than {PRICE_LIMIT}")
        return price

    @field_validator("stock", mode="before")
    @classmethod
    def check_stock(cls, value: Any) -> int:
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ValueError("Stock must be a non-negative integer")
        if value > STOCK_MAX:
            raise ValueError(f"Stock must be at most {STOCK_MAX}")
        return value


class ProductCreate(ProductFields):
    """상품 생성 요청 스키마.

    Product creation request schema. The owner is the authenticated user,
    never a body field.

    Attributes:
        name: 상품명 (Required, 2..200 characters)
        description: 상세 설명 (Optional)
        price: 가격 (Required, non-negative number)
        stock: 재고 (Non-negative integer, default 0)
    """

    model_config = ConfigDict(validate_default=True)

    stock: int = 0


class ProductUpdate(ProductFields):
    """상품 수정 요청 스키마 (부분 업데이트).

    Product update request schema (partial update).
    Validators only run for fields present in the body.
    """

    pass


class ProductResponse(CamelModel):
    """상품 응답 스키마.

    Product response schema. user is the owner summary when it was loaded.
    """

    id: str
    name: str
    description: str | None
    price: float
    stock: int
    user_id: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
    user: UserSummary | None = None
