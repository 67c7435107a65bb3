"""Tests for the per-request action state machine"""
import pytest

from mnp_admin.domain.enums import ActionState, TransitionFailureReason
from mnp_admin.domain.errors import ActionInFlightError
from mnp_admin.engine.action_tracker import ActionTracker


@pytest.fixture
def tracker():
    return ActionTracker()


def test_untouched_request_is_idle(tracker):
    assert tracker.get("r1").state == ActionState.IDLE


def test_success_path(tracker):
    tracker.begin("r1")
    assert tracker.is_in_flight("r1")
    
    status = tracker.succeed("r1", "done")
    
    assert status.state == ActionState.SUCCEEDED
    assert status.message == "done"
    assert not tracker.is_in_flight("r1")


def test_failure_keeps_reason(tracker):
    tracker.begin("r1")
    
    status = tracker.fail("r1", TransitionFailureReason.PERMISSION_DENIED, "denied")
    
    assert status.state == ActionState.FAILED
    assert status.reason == TransitionFailureReason.PERMISSION_DENIED


def test_second_begin_while_pending_is_refused(tracker):
    tracker.begin("r1")
    
    with pytest.raises(ActionInFlightError):
        tracker.begin("r1")


def test_requests_are_tracked_independently(tracker):
    tracker.begin("r1")
    
    tracker.begin("r2")
    
    assert tracker.is_in_flight("r1") and tracker.is_in_flight("r2")


def test_settled_request_can_start_again(tracker):
    tracker.begin("r1")
    tracker.fail("r1", TransitionFailureReason.UNKNOWN, "boom")
    
    assert tracker.begin("r1").state == ActionState.PENDING


def test_settling_without_begin_is_an_error(tracker):
    with pytest.raises(ValueError):
        tracker.succeed("r1", "done")
