"""API 라우터 패키지 — 모든 엔드포인트 통합.

API Router package — Aggregates all endpoints into a single router
for inclusion in the FastAPI application under /api.

Included routers:
    - users: 회원가입, 로그인, 사용자 조회 (Registration, login, user lookup)
    - products: 상품 CRUD (Product CRUD, owner-only mutations)
"""

from fastapi import APIRouter

from product_api.api.users import router as users_router
from product_api.api.products import router as products_router

api_router: APIRouter = APIRouter()

api_router.include_router(users_router, prefix="/users", tags=["Users"])
api_router.include_router(products_router, prefix="/products", tags=["Products"])
