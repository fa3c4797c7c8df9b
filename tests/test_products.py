"""상품 API 테스트 — CRUD, 필터, 소유권 검사."""

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from product_api.models.product import Product
from product_api.models.user import User
from product_api.repositories.product_repository import product_repository
from tests.conftest import auth_header, create_product


class TestProductCreate:
    async def test_create_product(self, client: AsyncClient, alice: User, alice_token: str):
        """상품 생성 성공 — 요청자가 소유자."""
        res = await client.post("/api/products", json={
            "name": "Desk Lamp",
            "description": "LED lamp",
            "price": 29.5,
            "stock": 10,
        }, headers=auth_header(alice_token))
        assert res.status_code == 201
        body = res.json()
        assert body["success"] is True
        assert body["message"] == "Product created successfully"
        data = body["data"]
        assert data["name"] == "Desk Lamp"
        assert data["price"] == 29.5
        assert data["stock"] == 10
        assert data["userId"] == str(alice.id)
        assert data["user"] == {"id": str(alice.id), "name": "Alice", "email": "alice@example.com"}

    async def test_create_defaults(self, client: AsyncClient, alice_token: str):
        """재고 기본값 0, 설명 없음."""
        res = await client.post("/api/products", json={
            "name": "Pencil",
            "price": 0,
        }, headers=auth_header(alice_token))
        assert res.status_code == 201
        data = res.json()["data"]
        assert data["stock"] == 0
        assert data["price"] == 0
        assert data["description"] is None

    async def test_create_ignores_owner_in_body(
        self, client: AsyncClient, alice: User, bob: User, alice_token: str
    ):
        """본문의 userId는 무시, 소유자는 항상 요청자."""
        res = await client.post("/api/products", json={
            "name": "Mug",
            "price": 8,
            "userId": str(bob.id),
        }, headers=auth_header(alice_token))
        assert res.status_code == 201
        assert res.json()["data"]["userId"] == str(alice.id)

    async def test_create_validation(self, client: AsyncClient, alice_token: str):
        """잘못된 필드마다 하나의 오류."""
        res = await client.post("/api/products", json={
            "name": "X",
            "description": 42,
            "price": -1,
            "stock": 1.5,
        }, headers=auth_header(alice_token))
        assert res.status_code == 400
        body = res.json()
        assert body["message"] == "Validation errors"
        errors = {e["field"]: e["message"] for e in body["errors"]}
        assert errors == {
            "name": "Name must be between 2 and 200 characters",
            "description": "Description must be a string",
            "price": "Price must be a non-negative number",
            "stock": "Stock must be a non-negative integer",
        }

    async def test_create_missing_required(self, client: AsyncClient, alice_token: str):
        """이름/가격 누락 → 400."""
        res = await client.post("/api/products", json={}, headers=auth_header(alice_token))
        assert res.status_code == 400
        fields = sorted(e["field"] for e in res.json()["errors"])
        assert fields == ["name", "price"]

    async def test_create_rejects_string_price(self, client: AsyncClient, alice_token: str):
        """문자열 가격 → 400."""
        res = await client.post("/api/products", json={
            "name": "Chair",
            "price": "cheap",
        }, headers=auth_header(alice_token))
        assert res.status_code == 400
        assert res.json()["errors"] == [
            {"field": "price", "message": "Price must be a non-negative number"}
        ]

    async def test_create_name_too_long(self, client: AsyncClient, alice_token: str):
        """201자 이름 → 400, 200자는 허용."""
        too_long = await client.post("/api/products", json={
            "name": "a" * 201,
            "price": 1,
        }, headers=auth_header(alice_token))
        assert too_long.status_code == 400

        at_limit = await client.post("/api/products", json={
            "name": "a" * 200,
            "price": 1,
        }, headers=auth_header(alice_token))
        assert at_limit.status_code == 201

    async def test_create_without_body(self, client: AsyncClient, alice_token: str):
        """본문 없는 생성 → name/price 필드 오류."""
        res = await client.post("/api/products", headers=auth_header(alice_token))
        assert res.status_code == 400
        fields = sorted(e["field"] for e in res.json()["errors"])
        assert fields == ["name", "price"]

    async def test_create_stock_out_of_range(self, client: AsyncClient, alice_token: str):
        """INTEGER 범위를 넘는 재고 → 500이 아닌 400."""
        res = await client.post("/api/products", json={
            "name": "Chair",
            "price": 1,
            "stock": 10**20,
        }, headers=auth_header(alice_token))
        assert res.status_code == 400
        assert res.json()["errors"] == [
            {"field": "stock", "message": "Stock must be at most 2147483647"}
        ]

        at_limit = await client.post("/api/products", json={
            "name": "Chair",
            "price": 1,
            "stock": 2**31 - 1,
        }, headers=auth_header(alice_token))
        assert at_limit.status_code == 201
        assert at_limit.json()["data"]["stock"] == 2**31 - 1

    async def test_create_reload_missing_is_404(
        self, client: AsyncClient, alice_token: str, monkeypatch: pytest.MonkeyPatch
    ):
        """생성 직후 재조회 실패 → 404 Product not found."""
        async def _missing(*args, **kwargs):
            return None

        monkeypatch.setattr(product_repository, "get_detail", _missing)
        res = await client.post("/api/products", json={
            "name": "Ghost",
            "price": 1,
        }, headers=auth_header(alice_token))
        assert res.status_code == 404
        assert res.json() == {"success": False, "message": "Product not found"}

    async def test_create_requires_auth(self, client: AsyncClient):
        """토큰 없이 생성 → 401."""
        res = await client.post("/api/products", json={"name": "Lamp", "price": 1})
        assert res.status_code == 401
        assert res.json()["message"] == "Access token required"


class TestProductList:
    async def test_list_with_owner_summary(
        self, client: AsyncClient, alice_token: str, widget: Product
    ):
        """목록 — count와 소유자 요약 포함."""
        res = await client.get("/api/products", headers=auth_header(alice_token))
        assert res.status_code == 200
        body = res.json()
        assert body["success"] is True
        assert body["count"] == 1
        item = body["data"][0]
        assert item["name"] == "Widget"
        assert item["price"] == 19.99
        assert item["user"]["email"] == "alice@example.com"

    async def test_list_price_range_inclusive(
        self, client: AsyncClient, db: AsyncSession, alice: User, alice_token: str
    ):
        """가격 범위 필터 — 경계값 포함."""
        for name, price in [("p5", 5), ("p10", 10), ("p15", 15), ("p20", 20), ("p25", 25)]:
            await create_product(db, alice, name, price)

        res = await client.get(
            "/api/products",
            params={"minPrice": 10, "maxPrice": 20},
            headers=auth_header(alice_token),
        )
        assert res.status_code == 200
        names = sorted(p["name"] for p in res.json()["data"])
        assert names == ["p10", "p15", "p20"]
        assert res.json()["count"] == 3

    async def test_list_min_price_only(
        self, client: AsyncClient, db: AsyncSession, alice: User, alice_token: str
    ):
        """최소 가격만 지정."""
        await create_product(db, alice, "cheap", 1)
        await create_product(db, alice, "pricey", 100)

        res = await client.get(
            "/api/products", params={"minPrice": 50}, headers=auth_header(alice_token)
        )
        assert [p["name"] for p in res.json()["data"]] == ["pricey"]

    async def test_list_zero_max_price(
        self, client: AsyncClient, db: AsyncSession, alice: User, alice_token: str
    ):
        """maxPrice=0도 필터로 적용."""
        await create_product(db, alice, "free", 0)
        await create_product(db, alice, "paid", 3)

        res = await client.get(
            "/api/products", params={"maxPrice": 0}, headers=auth_header(alice_token)
        )
        assert [p["name"] for p in res.json()["data"]] == ["free"]

    async def test_list_by_owner(
        self, client: AsyncClient, db: AsyncSession, alice: User, bob: User, alice_token: str
    ):
        """userId 필터."""
        await create_product(db, alice, "alice-item", 1)
        await create_product(db, bob, "bob-item", 2)

        res = await client.get(
            "/api/products", params={"userId": str(bob.id)}, headers=auth_header(alice_token)
        )
        data = res.json()["data"]
        assert [p["name"] for p in data] == ["bob-item"]
        assert data[0]["user"]["name"] == "Bob"

    async def test_list_newest_first(
        self, client: AsyncClient, db: AsyncSession, alice: User, alice_token: str
    ):
        """최신 등록순 정렬."""
        now = datetime.now(timezone.utc)
        for name, age in [("old", 3), ("newest", 1), ("middle", 2)]:
            db.add(Product(
                name=name,
                price=1,
                stock=0,
                user_id=alice.id,
                created_at=now - timedelta(hours=age),
            ))
        await db.flush()

        res = await client.get("/api/products", headers=auth_header(alice_token))
        assert [p["name"] for p in res.json()["data"]] == ["newest", "middle", "old"]

    async def test_list_invalid_filter(self, client: AsyncClient, alice_token: str):
        """음수/숫자 아닌 가격 필터 → 400."""
        res = await client.get(
            "/api/products", params={"minPrice": -5}, headers=auth_header(alice_token)
        )
        assert res.status_code == 400
        assert res.json()["errors"][0]["field"] == "minPrice"

        res = await client.get(
            "/api/products", params={"maxPrice": "abc"}, headers=auth_header(alice_token)
        )
        assert res.status_code == 400
        assert res.json()["errors"][0]["field"] == "maxPrice"

    async def test_list_requires_auth(self, client: AsyncClient):
        """토큰 없이 목록 → 401."""
        res = await client.get("/api/products")
        assert res.status_code == 401


class TestProductDetail:
    async def test_get_product(self, client: AsyncClient, bob_token: str, widget: Product):
        """다른 사용자도 상세 조회 가능."""
        res = await client.get(f"/api/products/{widget.id}", headers=auth_header(bob_token))
        assert res.status_code == 200
        assert res.json()["message"] == "Product retrieved successfully"
        data = res.json()["data"]
        assert data["id"] == str(widget.id)
        assert data["description"] == "A widget"
        assert data["user"]["name"] == "Alice"

    async def test_get_product_not_found(self, client: AsyncClient, alice_token: str):
        """없는 상품 → 404 Product not found."""
        res = await client.get(f"/api/products/{uuid.uuid4()}", headers=auth_header(alice_token))
        assert res.status_code == 404
        assert res.json() == {"success": False, "message": "Product not found"}


class TestProductUpdate:
    async def test_update_by_owner(self, client: AsyncClient, alice_token: str, widget: Product):
        """소유자 부분 수정 — 지정한 필드만 변경."""
        res = await client.put(f"/api/products/{widget.id}", json={
            "price": 24.99,
            "stock": 7,
        }, headers=auth_header(alice_token))
        assert res.status_code == 200
        body = res.json()
        assert body["message"] == "Product updated successfully"
        data = body["data"]
        assert data["price"] == 24.99
        assert data["stock"] == 7
        assert data["name"] == "Widget"
        assert data["description"] == "A widget"

    async def test_update_clear_description(
        self, client: AsyncClient, alice_token: str, widget: Product
    ):
        """설명을 null로 설정."""
        res = await client.put(
            f"/api/products/{widget.id}",
            json={"description": None},
            headers=auth_header(alice_token),
        )
        assert res.status_code == 200
        assert res.json()["data"]["description"] is None

    async def test_update_cannot_change_owner(
        self, client: AsyncClient, alice: User, bob: User, alice_token: str, widget: Product
    ):
        """본문의 userId로 소유자 변경 불가."""
        res = await client.put(f"/api/products/{widget.id}", json={
            "name": "Widget Pro",
            "userId": str(bob.id),
            "user_id": str(bob.id),
        }, headers=auth_header(alice_token))
        assert res.status_code == 200
        data = res.json()["data"]
        assert data["name"] == "Widget Pro"
        assert data["userId"] == str(alice.id)

    async def test_update_by_non_owner(self, client: AsyncClient, bob_token: str, widget: Product):
        """소유자가 아닌 사용자 수정 → 403."""
        res = await client.put(f"/api/products/{widget.id}", json={
            "price": 1,
        }, headers=auth_header(bob_token))
        assert res.status_code == 403
        assert res.json() == {
            "success": False,
            "message": "Not authorized to update this product",
        }

    async def test_update_validation(self, client: AsyncClient, alice_token: str, widget: Product):
        """수정 값 검증 — 명시적 null 이름 포함."""
        res = await client.put(f"/api/products/{widget.id}", json={
            "name": None,
            "stock": -3,
        }, headers=auth_header(alice_token))
        assert res.status_code == 400
        fields = sorted(e["field"] for e in res.json()["errors"])
        assert fields == ["name", "stock"]

    async def test_update_stock_out_of_range(
        self, client: AsyncClient, alice_token: str, widget: Product
    ):
        """수정 시에도 재고 상한 검증."""
        res = await client.put(
            f"/api/products/{widget.id}",
            json={"stock": 2**31},
            headers=auth_header(alice_token),
        )
        assert res.status_code == 400
        assert res.json()["errors"][0]["field"] == "stock"

    async def test_update_not_found(self, client: AsyncClient, alice_token: str):
        """없는 상품 수정 → 404."""
        res = await client.put(
            f"/api/products/{uuid.uuid4()}",
            json={"price": 1},
            headers=auth_header(alice_token),
        )
        assert res.status_code == 404


class TestProductDelete:
    async def test_delete_by_owner(self, client: AsyncClient, alice_token: str, widget: Product):
        """소유자 삭제 후 조회 → 404."""
        res = await client.delete(f"/api/products/{widget.id}", headers=auth_header(alice_token))
        assert res.status_code == 200
        assert res.json() == {"success": True, "message": "Product deleted successfully"}

        res = await client.get(f"/api/products/{widget.id}", headers=auth_header(alice_token))
        assert res.status_code == 404

    async def test_delete_by_non_owner(self, client: AsyncClient, bob_token: str, widget: Product):
        """소유자가 아닌 사용자 삭제 → 403, 상품 유지."""
        res = await client.delete(f"/api/products/{widget.id}", headers=auth_header(bob_token))
        assert res.status_code == 403
        assert res.json()["message"] == "Not authorized to delete this product"

        res = await client.get(f"/api/products/{widget.id}", headers=auth_header(bob_token))
        assert res.status_code == 200

    async def test_delete_not_found(self, client: AsyncClient, alice_token: str):
        """없는 상품 삭제 → 404."""
        res = await client.delete(f"/api/products/{uuid.uuid4()}", headers=auth_header(alice_token))
        assert res.status_code == 404
