"""Service Container - Explicit wiring of stores and services"""
from typing import Optional

from ..config.settings import Settings
from ..repositories.admin_role_repo import AdminRoleRepository
from ..repositories.async_mongo import AsyncMongoContext
from ..repositories.mongo_client import MongoContext
from ..repositories.request_repo import RequestRepository
from ..repositories.session_state_repo import SessionStateStore
from .action_service import RequestActionService
from .dashboard_service import DashboardService
from .identity_service import IdentityProvider
from .request_feed import RequestFeed
from .session_service import AdminSession
from .transition_service import StatusTransitionDispatcher


class AppServices:
    """Everything one application instance needs, constructed once"""
    
    def __init__(
        self,
        settings: Settings,
        request_repo: RequestRepository,
        role_repo: AdminRoleRepository,
        state_store: SessionStateStore,
        feed: RequestFeed,
        mongo: Optional[MongoContext] = None,
        async_mongo: Optional[AsyncMongoContext] = None
    ):
        self.settings = settings
        self.mongo = mongo
        self.async_mongo = async_mongo
        self.request_repo = request_repo
        self.identity_provider = IdentityProvider(settings, role_repo)
        self.session = AdminSession(settings, self.identity_provider, state_store)
        self.feed = feed
        self.dashboard = DashboardService(feed, self.session)
        self.dispatcher = StatusTransitionDispatcher(settings, request_repo)
        self.actions = RequestActionService(self.session, self.dashboard, self.dispatcher)
    
    @classmethod
    def build(
        cls,
        settings: Settings,
        mongo: MongoContext,
        async_mongo: AsyncMongoContext
    ) -> "AppServices":
        return cls(
            settings=settings,
            request_repo=RequestRepository(mongo.get_collection(settings.requests_collection)),
            role_repo=AdminRoleRepository(mongo.get_collection(settings.admin_roles_collection)),
            state_store=SessionStateStore(settings.session_state_path),
            feed=RequestFeed(settings, async_mongo),
            mongo=mongo,
            async_mongo=async_mongo,
        )
    
    def health(self) -> dict:
        mongo_health = self.mongo.health_check() if self.mongo else {"status": "unknown"}
        return {
            "mongo": mongo_health,
            "feed": {
                "status": self.feed.status.value,
                "error": self.feed.error,
                "requests": len(self.feed.snapshot),
            },
        }
    
    def close(self) -> None:
        self.dashboard.close()
        if self.mongo is not None:
            self.mongo.close()
        if self.async_mongo is not None:
            self.async_mongo.close()
