"""Action Service - Role-gated transitions with per-request in-flight tracking"""
from typing import Optional, Union

from ..domain.enums import AdminRole, RequestStatus, TransitionFailureReason
from ..domain.errors import RequestNotPendingError, RoleNotPermittedError, ValidationError
from ..domain.models import ActionStatus, TransitionOutcome
from ..engine.action_tracker import ActionTracker
from ..engine.permission_guard import PermissionGuard
from .dashboard_service import DashboardService
from .session_service import AdminSession
from .transition_service import StatusTransitionDispatcher, validate_transition_target
from ..utils.logger import get_logger

logger = get_logger(__name__)


class RequestActionService:
    """Validate/Reject actions issued from the console"""
    
    def __init__(
        self,
        session: AdminSession,
        dashboard: DashboardService,
        dispatcher: StatusTransitionDispatcher,
        tracker: Optional[ActionTracker] = None,
        guard: Optional[PermissionGuard] = None
    ):
        self._session = session
        self._dashboard = dashboard
        self._dispatcher = dispatcher
        self.tracker = tracker or ActionTracker()
        self.guard = guard or PermissionGuard()
    
    def transition(
        self,
        request_id: str,
        new_status: Union[str, RequestStatus],
        owner_key: Optional[str] = None
    ) -> TransitionOutcome:
        """
        Validate or reject one request.
        
        Raises:
            InvalidTransitionError: Bad target status (no store call made)
            RoleNotPermittedError: Current identity may not act on the request
            RequestNotPendingError: Request is already Validated or Rejected
            ActionInFlightError: A transition for the request is still pending
        """
        status = validate_transition_target(new_status)
        identity = self._session.identity
        
        if not self.guard.can_transition(identity):
            raise RoleNotPermittedError(
                "Sign in as an admin to process requests",
                details={"role": identity.role.value}
            )
        
        request = self._dashboard.find_request(request_id)
        if request is not None:
            if request.status.is_terminal and self.guard.can_act(
                identity, request.model_copy(update={"status": RequestStatus.PENDING})
            ):
                raise RequestNotPendingError(
                    f"Request {request_id} is already {request.status.value}",
                    details={"request_id": request_id, "status": request.status.value}
                )
            if not self.guard.can_act(identity, request):
                raise RoleNotPermittedError(
                    f"Not allowed to process request {request_id}",
                    details={
                        "role": identity.role.value,
                        "operator": identity.operator.value if identity.operator else None,
                        "source_provider": request.source_provider.value,
                        "status": request.status.value,
                    }
                )
            owner_key = owner_key or request.full_number
        elif identity.role != AdminRole.SUPER_ADMIN:
            # Source operator cannot be checked for a request outside the snapshot
            raise RoleNotPermittedError(
                f"Request {request_id} is not visible to this admin",
                details={"request_id": request_id}
            )
        
        if not owner_key:
            raise ValidationError(
                "owner_key is required for requests outside the current snapshot",
                details={"request_id": request_id}
            )
        
        self.tracker.begin(request_id)
        principal = self._session.principal
        try:
            outcome = self._dispatcher.apply_status_transition(
                request_id,
                owner_key,
                status,
                actor_id=principal.principal_id if principal else None,
            )
        except Exception as e:
            self.tracker.fail(request_id, TransitionFailureReason.UNKNOWN, str(e))
            raise
        
        if outcome.ok:
            self.tracker.succeed(request_id, outcome.message)
        else:
            self.tracker.fail(request_id, outcome.reason, outcome.message)
        return outcome
    
    def action_state(self, request_id: str) -> ActionStatus:
        return self.tracker.get(request_id)
