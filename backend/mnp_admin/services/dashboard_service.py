"""Dashboard Service - Re-derives buckets and analytics on every change"""
from typing import Optional, Sequence, Tuple

from pydantic import BaseModel, Field

from ..domain.enums import FeedStatus
from ..domain.models import (
    AdminIdentity, AnalyticsReport, CategorizedRequests, PortabilityRequest
)
from ..engine.analytics import compute_analytics
from ..engine.categorizer import categorize_requests
from .request_feed import RequestFeed, Snapshot
from .session_service import AdminSession


class DashboardView(BaseModel):
    """Everything the console renders for the current identity"""
    identity: AdminIdentity
    categorized: CategorizedRequests
    analytics: AnalyticsReport
    total_requests: int = 0
    feed_status: FeedStatus = FeedStatus.STOPPED
    error: Optional[str] = None


def derive_view(
    snapshot: Sequence[PortabilityRequest],
    identity: AdminIdentity
) -> Tuple[CategorizedRequests, AnalyticsReport]:
    """Pure recomputation of buckets and analytics from a full snapshot"""
    return categorize_requests(snapshot, identity), compute_analytics(snapshot, identity)


class DashboardService:
    """
    Keeps the derived view in step with the feed and the session.
    
    Each snapshot delivery and each identity change triggers exactly one
    full re-derivation; nothing is updated incrementally.
    """
    
    def __init__(self, feed: RequestFeed, session: AdminSession):
        self._feed = feed
        self._session = session
        self._snapshot: Snapshot = feed.snapshot
        self._categorized, self._analytics = derive_view(self._snapshot, session.identity)
        self._unsubscribers = [
            feed.subscribe(self._on_snapshot),
            session.on_identity_changed(self._on_identity),
        ]
    
    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot
    
    def _on_snapshot(self, snapshot: Snapshot) -> None:
        self._snapshot = snapshot
        self._recompute()
    
    def _on_identity(self, _identity: AdminIdentity) -> None:
        self._recompute()
    
    def _recompute(self) -> None:
        self._categorized, self._analytics = derive_view(self._snapshot, self._session.identity)
    
    def find_request(self, request_id: str) -> Optional[PortabilityRequest]:
        for request in self._snapshot:
            if request.request_id == request_id:
                return request
        return None
    
    def categorized(self) -> CategorizedRequests:
        return self._categorized
    
    def analytics(self) -> AnalyticsReport:
        return self._analytics
    
    def view(self) -> DashboardView:
        return DashboardView(
            identity=self._session.identity,
            categorized=self._categorized,
            analytics=self._analytics,
            total_requests=len(self._snapshot),
            feed_status=self._feed.status,
            error=self._feed.error,
        )
    
    def close(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []
