"""
Main API router
"""
from fastapi import APIRouter

from fieldcollect.api.v1 import (
    health,
    version,
    auth,
    records,
    custom_columns,
    agents,
    secondary_admins,
    stats,
)

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(version.router, tags=["version"])
api_router.include_router(auth.router, prefix="/auth", tags=["authentication"])
api_router.include_router(records.router, prefix="/records", tags=["records"])
api_router.include_router(custom_columns.router, prefix="/custom-columns", tags=["custom-columns"])
api_router.include_router(agents.router, prefix="/agents", tags=["agents"])
api_router.include_router(secondary_admins.router, prefix="/secondary-admins", tags=["secondary-admins"])
api_router.include_router(stats.router, prefix="/stats", tags=["stats"])
