"""Request Feed - Live subscription to the full portability request snapshot

Every delivery is the complete current set of requests (never a diff) and
replaces the previous snapshot wholesale. Two delivery modes:

- change_stream: a MongoDB change stream wakes the feed, which re-reads
  the whole collection
- poll: an APScheduler interval job re-reads the collection
"""
import asyncio
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from ..config.settings import Settings
from ..domain.enums import FeedStatus
from ..domain.models import PortabilityRequest
from ..repositories.async_mongo import AsyncMongoContext
from ..repositories.request_repo import documents_to_requests
from ..utils.logger import get_logger
from ..utils.time import utc_now

logger = get_logger(__name__)

Snapshot = Tuple[PortabilityRequest, ...]
SnapshotListener = Callable[[Snapshot], None]

SUBSCRIPTION_FAILURE_MESSAGE = (
    "Failed to load portability requests. Check that the admin is allowed "
    "to read the 'portability_requests' collection group."
)


class RequestFeed:
    """Long-lived subscription delivering full request snapshots"""
    
    def __init__(self, settings: Settings, mongo: AsyncMongoContext):
        self._settings = settings
        self._mongo = mongo
        self._snapshot: Snapshot = ()
        self._listeners: List[SnapshotListener] = []
        self._task: Optional[asyncio.Task] = None
        self._scheduler: Optional[AsyncIOScheduler] = None
        self.status: FeedStatus = FeedStatus.STOPPED
        self.error: Optional[str] = None
        self.last_delivery_at: Optional[datetime] = None
    
    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot
    
    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """Register a snapshot listener; returns an unsubscribe callable"""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)
    
    # =========================================================================
    # Lifecycle
    # =========================================================================
    
    async def start(self) -> None:
        """Begin delivering snapshots"""
        if self.status in (FeedStatus.LOADING, FeedStatus.LIVE):
            logger.warning("Request feed already running")
            return
        
        self.status = FeedStatus.LOADING
        self.error = None
        
        if self._settings.feed_mode == "poll":
            await self.refresh()
            self._scheduler = AsyncIOScheduler()
            self._scheduler.add_job(
                self.refresh,
                trigger=IntervalTrigger(seconds=self._settings.feed_poll_interval_seconds),
                id="request_feed_refresh",
                name="Refresh portability request snapshot",
                replace_existing=True,
                max_instances=1,
                coalesce=True,
            )
            self._scheduler.start()
            logger.info(
                f"Request feed polling every {self._settings.feed_poll_interval_seconds}s"
            )
        else:
            self._task = asyncio.create_task(self._watch())
            logger.info("Request feed watching change stream")
    
    async def stop(self) -> None:
        """Unsubscribe; the only cancellation point of the feed"""
        if self._scheduler is not None:
            self._scheduler.shutdown(wait=False)
            self._scheduler = None
        
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        
        self.status = FeedStatus.STOPPED
        logger.info("Request feed stopped")
    
    # =========================================================================
    # Delivery
    # =========================================================================
    
    async def refresh(self) -> None:
        """Re-read the whole collection and deliver it"""
        try:
            docs = await self._mongo.requests.find({}).to_list(length=None)
            requests = documents_to_requests(docs)
        except Exception as e:
            self._fail(e)
            return
        self.deliver(requests)
    
    async def _watch(self) -> None:
        try:
            await self.refresh()
            async with self._mongo.requests.watch() as stream:
                async for _change in stream:
                    await self.refresh()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self._fail(e)
    
    def deliver(self, requests: List[PortabilityRequest]) -> None:
        """Replace the snapshot and notify listeners"""
        self._snapshot = tuple(requests)
        self.status = FeedStatus.LIVE
        self.error = None
        self.last_delivery_at = utc_now()
        logger.info(
            f"Request feed delivered {len(self._snapshot)} total requests",
            extra={"count": len(self._snapshot)}
        )
        self._notify()
    
    def _fail(self, exc: Exception) -> None:
        logger.error(f"Request feed failed: {exc}", exc_info=exc)
        self._snapshot = ()
        self.status = FeedStatus.FAILED
        self.error = SUBSCRIPTION_FAILURE_MESSAGE
        self._notify()
    
    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self._snapshot)
            except Exception:
                logger.exception("Request feed listener failed")
