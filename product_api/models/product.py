"""상품 SQLAlchemy ORM 모델 정의.

Product SQLAlchemy ORM model definition.

Tables:
    - products: 상품 (Products, each owned by exactly one user)
"""

import uuid
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from sqlalchemy import CheckConstraint, String, Text, Numeric, Integer, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from product_api.database import Base
from product_api.utils.exceptions import ModelValidationError

# 상품명 길이 제한 — Product name length bounds (inclusive)
NAME_MIN_LENGTH: int = 2
NAME_MAX_LENGTH: int = 200
# INTEGER 컬럼 상한 — Largest value a 32-bit INTEGER column holds
STOCK_MAX: int = 2**31 - 1


class Product(Base):
    """상품 모델 — 사용자가 등록한 판매 상품.

    Product model — An item listed by a user.
    Attribute validators enforce the same bounds as the request schemas so
    that services writing directly to the model cannot bypass them.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        name: 상품명 (Product name, 2..200 chars)
        description: 상세 설명 (Description, optional)
        price: 가격 (Price, NUMERIC(10,2), >= 0)
        stock: 재고 수량 (Units in stock, 0..2147483647)
        user_id: 소유자 FK (Owning user foreign key)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)

    Relationships:
        user: 소유자 (Owning user)

    Constraints:
        ck_products_price_non_negative: 가격 >= 0 (Price is non-negative)
        ck_products_stock_non_negative: 재고 >= 0 (Stock is non-negative)
    """

    __tablename__ = "products"

    # 상품 고유 식별자 — Product unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 상품명 — Product display name
    name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), nullable=False)
    # 상세 설명 — Free-form description (optional)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    # 가격 — Price with two decimal places
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    # 재고 수량 — Units in stock
    stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    # 소유자 FK — Owning user (CASCADE: 사용자 삭제 시 상품도 삭제)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    # 수정 일시 — Last modification timestamp (UTC, auto-updated)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_products_price_non_negative"),
        CheckConstraint("stock >= 0", name="ck_products_stock_non_negative"),
    )

    # 관계 — Relationships
    user = relationship("User", back_populates="products")

    @validates("name")
    def _validate_name(self, key: str, value: str) -> str:
        if value is None or not NAME_MIN_LENGTH <= len(value) <= NAME_MAX_LENGTH:
            raise ModelValidationError(
                key, f"Name must be between {NAME_MIN_LENGTH} and {NAME_MAX_LENGTH} characters"
            )
        return value

    @validates("price")
    def _validate_price(self, key: str, value: Decimal | float | int) -> Decimal:
        try:
            price: Decimal = Decimal(str(value))
        except (InvalidOperation, TypeError):
            raise ModelValidationError(key, "Price must be a number")
        if price < 0:
            raise ModelValidationError(key, "Price must be a non-negative number")
        return price

    @validates("stock")
    def _validate_stock(self, key: str, value: int) -> int:
        if value is None or value < 0:
            raise ModelValidationError(key, "Stock must be a non-negative integer")
        if value > STOCK_MAX:
            raise ModelValidationError(key, f"Stock must be at most {STOCK_MAX}")
        return value
