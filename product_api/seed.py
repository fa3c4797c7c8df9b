"""초기 데이터 시드 스크립트 — 테이블 및 관리자 계정 생성.

Seed script — Creates tables and the bootstrap admin account.
Registration only ever creates "user" accounts, so the first admin
comes from here.

Usage:
    python -m product_api.seed

Environment:
    SEED_ADMIN_EMAIL: 관리자 이메일 (default: admin@example.com)
    SEED_ADMIN_PASSWORD: 관리자 비밀번호 (default: admin123)
"""

import asyncio
import os

from sqlalchemy import select

from product_api.database import async_session, engine, Base
from product_api.models import User
from product_api.models.user import ROLE_ADMIN
from product_api.utils.logging import configure_logging, get_logger
from product_api.utils.password import hash_password

logger = get_logger(__name__)


async def seed() -> None:
    """데이터베이스를 초기 데이터로 시드합니다.

    Create all tables, then insert the admin user.

    Idempotent: 관리자 이메일이 이미 있으면 건너뜁니다 (Skips if the admin email exists).
    """
    # 테이블 생성 — DDL 실행 (Create all tables from ORM metadata)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    email: str = os.environ.get("SEED_ADMIN_EMAIL", "admin@example.com")
    password: str = os.environ.get("SEED_ADMIN_PASSWORD", "admin123")

    async with async_session() as db:
        result = await db.execute(select(User).where(User.email == email))
        if result.scalar_one_or_none() is not None:
            logger.info("seed_skipped", email=email)
        else:
            admin: User = User(
                email=email,
                name="System Admin",
                role=ROLE_ADMIN,
                password_hash=hash_password(password),
            )
            db.add(admin)
            await db.commit()
            logger.info("seed_completed", admin_id=str(admin.id), email=email)

    await engine.dispose()


if __name__ == "__main__":
    from product_api.config import settings

    configure_logging(settings)
    asyncio.run(seed())
