from fastapi import APIRouter

from cipdesign.api.v1.endpoints import (
    design,
    catalog,
    ai,
    health,
)

api_router = APIRouter()

# ==============================================================================
# 1. Core (CIP 설계 + 이력)
# ==============================================================================
api_router.include_router(design.router, prefix="/design", tags=["Design"])

# ==============================================================================
# 2. Data & Resources (카탈로그)
# ==============================================================================
api_router.include_router(catalog.router, prefix="/catalog", tags=["Catalog"])

# ==============================================================================
# 3. Features (AI 어시스턴트)
# ==============================================================================
api_router.include_router(ai.router, prefix="/ai", tags=["AI"])

# ==============================================================================
# 4. System (헬스 체크)
# ==============================================================================
api_router.include_router(health.router, tags=["Health"])
