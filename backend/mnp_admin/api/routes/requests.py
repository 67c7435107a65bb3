"""Portability Request API Routes - Buckets, scoped fetch and transitions"""
from typing import Optional
from fastapi import APIRouter, Depends, Query
from pymongo.errors import PyMongoError

from ..deps import get_actions, get_dashboard, get_request_repo, get_session
from .schemas import (
    CategorizedResponse, ScopedRequestsResponse, TransitionRequest,
    to_categorized_response, to_row
)
from ...domain.enums import AdminRole, RequestStatus, parse_operator, parse_status, operator_from_legacy_role
from ...domain.errors import RoleNotPermittedError, SubscriptionFailureError, ValidationError
from ...domain.models import ActionStatus, TransitionOutcome
from ...repositories.request_repo import RequestRepository
from ...services.action_service import RequestActionService
from ...services.dashboard_service import DashboardService
from ...services.request_feed import SUBSCRIPTION_FAILURE_MESSAGE
from ...services.session_service import AdminSession
from ...services.transition_service import outcome_error
from ...utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter()


@router.get("/categorized", response_model=CategorizedResponse)
async def get_categorized_requests(
    session: AdminSession = Depends(get_session),
    dashboard: DashboardService = Depends(get_dashboard),
    actions: RequestActionService = Depends(get_actions)
):
    """
    Requests partitioned for the current admin.
    
    - ProviderAdmin: outgoing (action required), incoming, validated incoming
    - SuperAdmin: per source operator, plus every pending request
    - Guest: empty
    """
    return to_categorized_response(dashboard.categorized(), session.identity, actions.guard)


@router.get("/scoped", response_model=ScopedRequestsResponse)
async def get_scoped_requests(
    operator: Optional[str] = Query(None, description="Target operator, e.g. ORANGE"),
    role: Optional[str] = Query(None, description="Legacy role string, e.g. ORANGE_ADMIN"),
    status: str = Query(RequestStatus.PENDING.value),
    session: AdminSession = Depends(get_session),
    repo: RequestRepository = Depends(get_request_repo),
    actions: RequestActionService = Depends(get_actions)
):
    """One-shot fetch of requests joining an operator in a given status."""
    identity = session.identity
    if identity.role == AdminRole.GUEST:
        raise RoleNotPermittedError("Sign in as an admin to view requests")
    
    target = parse_operator(operator) if operator else operator_from_legacy_role(role)
    if target is None:
        target = identity.operator
    if target is None:
        raise ValidationError(
            "Invalid admin role or target provider not found.",
            details={"operator": operator, "role": role}
        )
    if identity.role == AdminRole.PROVIDER_ADMIN and target != identity.operator:
        raise RoleNotPermittedError(
            f"Not allowed to view requests for {target.value}",
            details={"operator": identity.operator.value}
        )
    
    request_status = parse_status(status)
    if request_status is None:
        raise ValidationError(f"Unknown status: {status}", details={"status": status})
    
    try:
        items = repo.query_by_target_and_status(target, request_status)
    except PyMongoError as e:
        logger.error(f"Scoped request fetch failed: {e}", extra={"operator": target.value})
        raise SubscriptionFailureError(SUBSCRIPTION_FAILURE_MESSAGE)
    return ScopedRequestsResponse(
        operator=target,
        status=request_status.value,
        items=[to_row(r, identity, actions.guard) for r in items],
        total=len(items),
    )


@router.post("/{request_id}/transition", response_model=TransitionOutcome)
async def transition_request(
    request_id: str,
    body: TransitionRequest,
    actions: RequestActionService = Depends(get_actions)
):
    """
    Validate or reject a pending request.
    
    Failures are classified: 403 permission denied at the document path,
    404 document not found, 502 anything else.
    """
    outcome = actions.transition(request_id, body.new_status, owner_key=body.owner_key)
    if not outcome.ok:
        raise outcome_error(outcome)
    return outcome


@router.get("/{request_id}/action-state", response_model=ActionStatus)
async def get_action_state(
    request_id: str,
    actions: RequestActionService = Depends(get_actions)
):
    """In-flight state of the last action on a request."""
    return actions.action_state(request_id)
