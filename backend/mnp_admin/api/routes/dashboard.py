"""Dashboard API Routes - Analytics and combined console view"""
from fastapi import APIRouter, Depends

from ..deps import get_actions, get_dashboard, get_session
from .schemas import DashboardResponse, FeedState, to_categorized_response
from ...domain.models import AnalyticsReport
from ...services.action_service import RequestActionService
from ...services.dashboard_service import DashboardService
from ...services.session_service import AdminSession

router = APIRouter()


@router.get("/analytics", response_model=AnalyticsReport)
async def get_analytics(dashboard: DashboardService = Depends(get_dashboard)):
    """
    Entries, exits and net per operator.
    
    SuperAdmin receives the annual breakdown (most recent year first);
    ProviderAdmin receives its own operator's totals only.
    """
    return dashboard.analytics()


@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard_view(
    session: AdminSession = Depends(get_session),
    dashboard: DashboardService = Depends(get_dashboard),
    actions: RequestActionService = Depends(get_actions)
):
    """Buckets, analytics and feed state; feed errors are returned as a banner, not raised."""
    view = dashboard.view()
    return DashboardResponse(
        categorized=to_categorized_response(view.categorized, session.identity, actions.guard),
        analytics=view.analytics,
        feed=FeedState(
            status=view.feed_status,
            error=view.error,
            total_requests=view.total_requests,
        ),
    )
