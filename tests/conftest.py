"""테스트 인프라 — 인메모리 SQLite DB, 세션, httpx 클라이언트 픽스처.

Each test gets its own in-memory SQLite database (aiosqlite + StaticPool)
with foreign keys enforced; the app's get_db dependency is overridden to
yield the test session.
"""

import os

# 앱 임포트 전에 테스트 환경 설정 — Configure env before importing the app
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")

from collections.abc import AsyncGenerator  # noqa: E402

import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import event  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from product_api.database import Base, get_db  # noqa: E402
from product_api.main import app  # noqa: E402
from product_api.models import Product, User  # noqa: E402
from product_api.models.user import ROLE_ADMIN, ROLE_USER  # noqa: E402
from product_api.utils.jwt import create_access_token  # noqa: E402
from product_api.utils.password import hash_password  # noqa: E402


# ---------------------------------------------------------------------------
# Function-scoped: 엔진, 세션, 클라이언트
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """테스트용 async 엔진 — 테스트마다 새 인메모리 DB와 스키마."""
    eng = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(eng.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, _record) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """각 테스트에 격리된 DB 세션을 제공합니다."""
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with factory() as session:
        yield session
        # 커밋되지 않은 변경 처리
        try:
            await session.commit()
        except Exception:
            await session.rollback()


def _override_db(db: AsyncSession):
    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    return _override_get_db


@pytest_asyncio.fixture
async def client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """FastAPI 테스트 클라이언트 — DB 세션을 오버라이드합니다."""
    app.dependency_overrides[get_db] = _override_db(db)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def lenient_client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """500 응답 검증용 클라이언트 — 앱 예외를 다시 던지지 않습니다.

    Starlette re-raises unhandled exceptions after the 500 response is sent;
    this client returns the response instead.
    """
    app.dependency_overrides[get_db] = _override_db(db)

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# 헬퍼: 테스트용 데이터 생성
# ---------------------------------------------------------------------------
async def create_user(
    db: AsyncSession,
    email: str,
    name: str,
    password: str = "secret123",
    role: str = ROLE_USER,
) -> User:
    """테스트 사용자를 생성합니다."""
    user = User(email=email, name=name, role=role, password_hash=hash_password(password))
    db.add(user)
    await db.flush()
    await db.refresh(user)
    return user


async def create_product(
    db: AsyncSession,
    owner: User,
    name: str,
    price: str | float,
    stock: int = 0,
    description: str | None = None,
) -> Product:
    """테스트 상품을 생성합니다."""
    product = Product(
        name=name,
        price=price,
        stock=stock,
        description=description,
        user_id=owner.id,
    )
    db.add(product)
    await db.flush()
    await db.refresh(product)
    return product


def make_token(user: User) -> str:
    """테스트용 JWT 액세스 토큰을 생성합니다."""
    return create_access_token({"sub": str(user.id), "email": user.email, "role": user.role})


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def alice(db: AsyncSession) -> User:
    """일반 사용자 (상품 소유자)."""
    return await create_user(db, "alice@example.com", "Alice", password="alice123")


@pytest_asyncio.fixture
async def bob(db: AsyncSession) -> User:
    """다른 일반 사용자 (소유자 아님)."""
    return await create_user(db, "bob@example.com", "Bob", password="bob12345")


@pytest_asyncio.fixture
async def admin(db: AsyncSession) -> User:
    """관리자 사용자."""
    return await create_user(db, "admin@example.com", "Admin", password="admin123", role=ROLE_ADMIN)


@pytest_asyncio.fixture
async def alice_token(alice: User) -> str:
    return make_token(alice)


@pytest_asyncio.fixture
async def bob_token(bob: User) -> str:
    return make_token(bob)


@pytest_asyncio.fixture
async def admin_token(admin: User) -> str:
    return make_token(admin)


@pytest_asyncio.fixture
async def widget(db: AsyncSession, alice: User) -> Product:
    """Alice가 소유한 상품."""
    return await create_product(db, alice, "Widget", "19.99", stock=5, description="A widget")
