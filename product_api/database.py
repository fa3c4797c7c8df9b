"""비동기 SQLAlchemy 엔진과 세션.

Async engine, session factory and declarative base shared by the models,
repositories, Alembic and the seed script.
"""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from product_api.config import settings


def _engine_options(database_url: str) -> dict[str, Any]:
    """URL의 백엔드에 맞는 create_async_engine 인자.

    Pool sizing and the asyncpg statement-cache switch are PostgreSQL only;
    SQLite (used by the test suite) takes neither.
    """
    options: dict[str, Any] = {"echo": settings.DEBUG, "pool_pre_ping": True}
    if make_url(database_url).get_backend_name() == "postgresql":
        # 트랜잭션 모드 풀러 뒤에서는 prepared statement 캐시를 끔
        options.update(pool_size=5, max_overflow=10, connect_args={"statement_cache_size": 0})
    return options


engine: AsyncEngine = create_async_engine(settings.DATABASE_URL, **_engine_options(settings.DATABASE_URL))

# 커밋 후에도 속성 접근 가능 (expire_on_commit=False)
async_session: async_sessionmaker[AsyncSession] = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """모든 ORM 모델의 베이스 — Declarative base for every model."""


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """요청 범위 세션 의존성.

    Yields one session per request; the router commits, and the session is
    closed (rolling back anything uncommitted) when the request ends.
    """
    async with async_session() as session:
        yield session
