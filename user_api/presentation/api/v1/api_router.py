"""
Main API router.

Aggregates all endpoint routers; the application factory mounts it under
``settings.API_PREFIX``.
"""

from fastapi import APIRouter

from user_api.presentation.api.v1.endpoints.users import router as users_router

api_v1_router = APIRouter()

api_v1_router.include_router(users_router, prefix="/users")
