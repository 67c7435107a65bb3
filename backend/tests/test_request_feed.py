"""Tests for the live request feed and dashboard re-derivation"""
from unittest.mock import AsyncMock, MagicMock

from pymongo.errors import OperationFailure

from mnp_admin.domain.enums import AdminRole, FeedStatus, Operator, RequestStatus
from mnp_admin.services.request_feed import SUBSCRIPTION_FAILURE_MESSAGE, RequestFeed

from .factories import at, make_request


def mongo_returning(docs=None, error=None):
    """AsyncMongoContext stand-in whose find().to_list() yields docs or raises"""
    mongo = MagicMock()
    cursor = MagicMock()
    cursor.to_list = AsyncMock(return_value=docs or [], side_effect=error)
    mongo.requests.find.return_value = cursor
    return mongo


DOCS = [
    {"_id": "artifacts/a/users/+1/portability_requests/r1", "id": "r1", "fullNumber": "+1",
     "sourceProvider": "ORANGE", "targetProvider": "AIRTEL", "status": "PENDING",
     "submittedAt": at(2024)},
    {"_id": "artifacts/a/users/+2/portability_requests/r2", "id": "r2", "fullNumber": "+2",
     "sourceProvider": "AIRTEL", "targetProvider": "ORANGE", "status": "Validated",
     "submittedAt": at(2023)},
]


async def test_refresh_delivers_full_snapshot(settings):
    feed = RequestFeed(settings, mongo_returning(DOCS))
    delivered = []
    feed.subscribe(delivered.append)
    
    await feed.refresh()
    
    assert feed.status == FeedStatus.LIVE
    assert [r.request_id for r in feed.snapshot] == ["r1", "r2"]
    assert len(delivered) == 1
    assert feed.last_delivery_at is not None


async def test_each_delivery_replaces_the_snapshot(settings):
    feed = RequestFeed(settings, mongo_returning(DOCS))
    await feed.refresh()
    
    feed.deliver([make_request("r9", Operator.VODACOM, Operator.ORANGE)])
    
    assert [r.request_id for r in feed.snapshot] == ["r9"]


async def test_failure_clears_snapshot_and_sets_banner(settings):
    feed = RequestFeed(settings, mongo_returning(DOCS))
    await feed.refresh()
    feed._mongo = mongo_returning(error=OperationFailure("not authorized", code=13))
    
    await feed.refresh()
    
    assert feed.status == FeedStatus.FAILED
    assert feed.snapshot == ()
    assert feed.error == SUBSCRIPTION_FAILURE_MESSAGE


async def test_unusable_document_does_not_sink_the_snapshot(settings):
    bad = {**DOCS[0], "_id": "artifacts/a/users/+3/portability_requests/r3", "id": "r3",
           "firstName": 12345, "email": ["x"], "firebaseUid": 7}
    feed = RequestFeed(settings, mongo_returning([*DOCS, bad]))
    
    await feed.refresh()
    
    assert feed.status == FeedStatus.LIVE
    assert [r.request_id for r in feed.snapshot] == ["r1", "r2", "r3"]
    assert feed.snapshot[2].first_name == "N/A"
    assert feed.snapshot[2].owner_uid is None


async def test_watch_failure_sets_banner(settings):
    mongo = mongo_returning(DOCS)
    mongo.requests.watch.side_effect = RuntimeError("change stream closed")
    feed = RequestFeed(settings, mongo)
    
    await feed._watch()
    
    assert feed.status == FeedStatus.FAILED
    assert feed.snapshot == ()
    assert feed.error == SUBSCRIPTION_FAILURE_MESSAGE


async def test_refresh_failure_outside_the_driver_sets_banner(settings):
    feed = RequestFeed(settings, mongo_returning(error=RuntimeError("decode error")))
    
    await feed.refresh()
    
    assert feed.status == FeedStatus.FAILED
    assert feed.error == SUBSCRIPTION_FAILURE_MESSAGE


async def test_failing_listener_does_not_stop_delivery(settings):
    feed = RequestFeed(settings, mongo_returning(DOCS))
    delivered = []
    
    def broken(_snapshot):
        raise RuntimeError("listener bug")
    
    feed.subscribe(broken)
    feed.subscribe(delivered.append)
    
    await feed.refresh()
    
    assert feed.status == FeedStatus.LIVE
    assert len(delivered) == 1


async def test_poll_mode_runs_scheduler(settings):
    settings.feed_mode = "poll"
    feed = RequestFeed(settings, mongo_returning(DOCS))
    
    await feed.start()
    try:
        assert feed.status == FeedStatus.LIVE
        assert feed._scheduler is not None
        assert feed._scheduler.get_job("request_feed_refresh") is not None
    finally:
        await feed.stop()
    
    assert feed.status == FeedStatus.STOPPED
    assert feed._scheduler is None


async def test_unsubscribed_listener_is_not_called(settings):
    feed = RequestFeed(settings, mongo_returning(DOCS))
    delivered = []
    unsubscribe = feed.subscribe(delivered.append)
    unsubscribe()
    
    await feed.refresh()
    
    assert delivered == []


def test_dashboard_recomputes_on_snapshot_and_identity(services):
    services.session.start()
    services.session.select_role(AdminRole.PROVIDER_ADMIN, Operator.ORANGE)
    
    services.feed.deliver([
        make_request("r1", Operator.ORANGE, Operator.AIRTEL, submitted_at=at(2024)),
        make_request("r2", Operator.AIRTEL, Operator.ORANGE, submitted_at=at(2024)),
    ])
    
    categorized = services.dashboard.categorized()
    assert [r.request_id for r in categorized.outgoing] == ["r1"]
    assert [r.request_id for r in categorized.incoming] == ["r2"]
    
    services.session.select_role(AdminRole.PROVIDER_ADMIN, Operator.AIRTEL)
    
    categorized = services.dashboard.categorized()
    assert [r.request_id for r in categorized.outgoing] == ["r2"]
    assert services.dashboard.analytics().operators == [Operator.AIRTEL]


def test_dashboard_view_reports_feed_failure(services):
    services.session.start()
    services.feed.deliver([make_request("r1", Operator.ORANGE, Operator.AIRTEL, RequestStatus.PENDING)])
    services.feed._fail(RuntimeError("boom"))
    
    view = services.dashboard.view()
    
    assert view.feed_status == FeedStatus.FAILED
    assert view.error == SUBSCRIPTION_FAILURE_MESSAGE
    assert view.total_requests == 0
