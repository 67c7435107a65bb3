"""Service modules - Business logic layer"""
from .identity_service import IdentityProvider
from .session_service import AdminSession
from .request_feed import RequestFeed
from .dashboard_service import DashboardService
from .transition_service import StatusTransitionDispatcher
from .action_service import RequestActionService
from .container import AppServices

__all__ = [
    "IdentityProvider",
    "AdminSession",
    "RequestFeed",
    "DashboardService",
    "StatusTransitionDispatcher",
    "RequestActionService",
    "AppServices",
]
