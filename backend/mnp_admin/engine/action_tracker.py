"""Action Tracker - In-flight state machine per transition target

    IDLE -> PENDING -> SUCCEEDED
                    -> FAILED(reason)

A settled request (SUCCEEDED or FAILED) can be started again.
"""
from typing import Dict, Optional

from ..domain.enums import ActionState, TransitionFailureReason
from ..domain.errors import ActionInFlightError
from ..domain.models import ActionStatus
from ..utils.time import utc_now


class ActionTracker:
    """Tracks one outstanding transition per request"""
    
    def __init__(self):
        self._states: Dict[str, ActionStatus] = {}
    
    def get(self, request_id: str) -> ActionStatus:
        """Current state; IDLE if no action was ever started"""
        return self._states.get(request_id) or ActionStatus(request_id=request_id)
    
    def is_in_flight(self, request_id: str) -> bool:
        return self.get(request_id).state == ActionState.PENDING
    
    def begin(self, request_id: str) -> ActionStatus:
        """Move to PENDING; refuses while another action is in flight"""
        if self.is_in_flight(request_id):
            raise ActionInFlightError(
                f"A transition for request {request_id} is already in progress",
                details={"request_id": request_id}
            )
        return self._set(request_id, ActionState.PENDING)
    
    def succeed(self, request_id: str, message: str) -> ActionStatus:
        self._require_pending(request_id)
        return self._set(request_id, ActionState.SUCCEEDED, message=message)
    
    def fail(
        self,
        request_id: str,
        reason: TransitionFailureReason,
        message: str
    ) -> ActionStatus:
        self._require_pending(request_id)
        return self._set(request_id, ActionState.FAILED, reason=reason, message=message)
    
    def _require_pending(self, request_id: str) -> None:
        if not self.is_in_flight(request_id):
            raise ValueError(f"No transition in flight for request {request_id}")
    
    def _set(
        self,
        request_id: str,
        state: ActionState,
        reason: Optional[TransitionFailureReason] = None,
        message: Optional[str] = None
    ) -> ActionStatus:
        status = ActionStatus(
            request_id=request_id,
            state=state,
            reason=reason,
            message=message,
            updated_at=utc_now(),
        )
        self._states[request_id] = status
        return status
