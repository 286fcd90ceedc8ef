"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from cms.api.v1.dependencies (no manual repo/service construction).
"""

from fastapi import APIRouter

from cms.api.v1.endpoints import collections, health, records

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(collections.router, prefix="/collections", tags=["collections"])
api_router.include_router(records.router, prefix="/data", tags=["records"])
