"""API Routes module"""
from fastapi import APIRouter

from .session import router as session_router
from .requests import router as requests_router
from .dashboard import router as dashboard_router
from .health import router as health_router

# Main API router
api_router = APIRouter()

api_router.include_router(session_router, prefix="/session", tags=["Session"])
api_router.include_router(requests_router, prefix="/requests", tags=["Requests"])
api_router.include_router(dashboard_router, tags=["Dashboard"])

__all__ = ["api_router", "health_router"]
