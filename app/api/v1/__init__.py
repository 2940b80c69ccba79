"""API v1 routes."""

from fastapi import APIRouter

from app.api.v1 import health, users
from app.api.v1.records import build_record_router
from app.core.ownership import RECORD_OWNERSHIP

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(users.router, prefix="/users", tags=["users"])
for _entity in RECORD_OWNERSHIP.entities():
    router.include_router(build_record_router(_entity), prefix=f"/{_entity}", tags=[_entity])
