"""
API router aggregating all endpoint routers.
"""
from fastapi import APIRouter

from app.api.endpoints import generation, health, oauth

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(oauth.router, tags=["oauth"])
api_router.include_router(generation.router, tags=["generation"])
