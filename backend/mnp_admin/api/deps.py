"""API Dependencies - Resolve services from the application instance"""
from typing import Optional
from fastapi import Header, Request

from ..domain.errors import DomainError
from ..repositories.request_repo import RequestRepository
from ..services.action_service import RequestActionService
from ..services.container import AppServices
from ..services.dashboard_service import DashboardService
from ..services.session_service import AdminSession


def get_services(request: Request) -> AppServices:
    """Services constructed in the application lifespan"""
    services = getattr(request.app.state, "services", None)
    if services is None:
        raise DomainError("Application services are not initialized", error_code="NOT_READY")
    return services


def get_session(request: Request) -> AdminSession:
    return get_services(request).session


def get_dashboard(request: Request) -> DashboardService:
    return get_services(request).dashboard


def get_actions(request: Request) -> RequestActionService:
    return get_services(request).actions


def get_request_repo(request: Request) -> RequestRepository:
    return get_services(request).request_repo


async def get_bearer_token_dep(
    authorization: Optional[str] = Header(None)
) -> Optional[str]:
    """Raw token from the Authorization header, without the 'Bearer ' prefix"""
    if not authorization:
        return None
    if authorization.startswith("Bearer "):
        return authorization[7:]
    return authorization
