"""사용자 SQLAlchemy ORM 모델 정의.

User SQLAlchemy ORM model definition.

Tables:
    - users: 사용자 계정 (User accounts, email is globally unique)
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import String, DateTime, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from product_api.database import Base

# 역할 이름 — Role names stored in users.role
ROLE_USER: str = "user"
ROLE_ADMIN: str = "admin"

# 컬럼 길이 — Column widths shared with the request schemas
EMAIL_MAX_LENGTH: int = 255
NAME_MAX_LENGTH: int = 100


class User(Base):
    """사용자 모델 — 시스템 사용자 계정 정보.

    User model — System user account information.
    Owns zero or more products; only the owner may modify them.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        email: 로그인 이메일 (Login email, unique)
        password_hash: bcrypt 해시된 비밀번호 (bcrypt-hashed password)
        name: 표시 이름 (Display name)
        role: 역할 이름 (Role name: "user" or "admin")
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)

    Relationships:
        products: 이 사용자가 소유한 상품 목록 (Owned products, cascade delete)

    Constraints:
        uq_users_email: 이메일 전역 고유 (Unique email across all users)
    """

    __tablename__ = "users"

    # 사용자 고유 식별자 — User unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 로그인 이메일 — Login email (전역 고유, globally unique)
    email: Mapped[str] = mapped_column(String(EMAIL_MAX_LENGTH), nullable=False)
    # 비밀번호 해시 — bcrypt hashed password (평문 저장 금지, never store plaintext)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    # 표시 이름 — Display name
    name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), nullable=False)
    # 역할 — "user" 기본값, "admin"은 시드 스크립트로만 생성
    role: Mapped[str] = mapped_column(String(20), nullable=False, default=ROLE_USER)
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    # 수정 일시 — Last modification timestamp (UTC, auto-updated)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("email", name="uq_users_email"),
    )

    # 관계 — Relationships
    products = relationship("Product", back_populates="user", cascade="all, delete-orphan")
