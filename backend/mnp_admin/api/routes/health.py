"""Health and service information endpoints"""
from fastapi import APIRouter, Request

router = APIRouter()

APP_NAME = "Number Portability Admin Console"
APP_VERSION = "1.0.0"


@router.get("/health")
async def health(request: Request):
    """Store connectivity and live feed state; 'degraded' while MongoDB is unreachable."""
    services = getattr(request.app.state, "services", None)
    details = services.health() if services else {}
    healthy = details.get("mongo", {}).get("status") == "healthy"
    return {
        "status": "healthy" if healthy else "degraded",
        "version": APP_VERSION,
        "environment": request.app.state.settings.environment,
        **details,
    }


@router.get("/")
async def root(request: Request):
    return {
        "name": APP_NAME,
        "version": APP_VERSION,
        "docs": request.app.docs_url,
    }
