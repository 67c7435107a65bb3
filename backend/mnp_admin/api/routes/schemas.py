"""Request/Response Models for the admin console API"""
from typing import Dict, List, Optional
from pydantic import BaseModel, Field

from ...domain.enums import AdminRole, FeedStatus, Operator
from ...domain.models import (
    AdminIdentity, AnalyticsReport, CategorizedRequests, PortabilityRequest
)
from ...engine.permission_guard import PermissionGuard
from ...utils.time import format_iso


# ============================================================================
# Session
# ============================================================================

class LoginRequest(BaseModel):
    """Role selection login"""
    role: AdminRole
    operator: Optional[Operator] = None


class SessionResponse(BaseModel):
    """Current session state"""
    auth_ready: bool
    principal_id: Optional[str] = None
    principal_kind: Optional[str] = None
    role: AdminRole
    operator: Optional[Operator] = None
    auth_error: Optional[str] = None


# ============================================================================
# Requests
# ============================================================================

class RequestRow(BaseModel):
    """One request as rendered in a table row"""
    request_id: str
    full_number: str
    first_name: str
    email: str
    source_provider: Operator
    target_provider: Operator
    status: str
    status_label: str
    can_act: bool
    submitted_at: Optional[str] = None


class SuperAdminGroupResponse(BaseModel):
    outgoing: List[RequestRow] = Field(default_factory=list)
    validated: List[RequestRow] = Field(default_factory=list)


class CategorizedResponse(BaseModel):
    """Role-dependent request buckets"""
    role: AdminRole
    operator: Optional[Operator] = None
    outgoing: List[RequestRow] = Field(default_factory=list)
    incoming: List[RequestRow] = Field(default_factory=list)
    validated_incoming: List[RequestRow] = Field(default_factory=list)
    super_admin: Dict[Operator, SuperAdminGroupResponse] = Field(default_factory=dict)


class ScopedRequestsResponse(BaseModel):
    """One-shot scoped fetch result"""
    operator: Operator
    status: str
    items: List[RequestRow]
    total: int


class TransitionRequest(BaseModel):
    """Validate or reject a request"""
    new_status: str = Field(..., description="Validated or Rejected")
    owner_key: Optional[str] = Field(None, description="Owner path segment; defaults to the request's full number")


# ============================================================================
# Dashboard
# ============================================================================

class FeedState(BaseModel):
    status: FeedStatus
    error: Optional[str] = None
    total_requests: int = 0


class DashboardResponse(BaseModel):
    """Buckets, analytics and feed state in one payload"""
    categorized: CategorizedResponse
    analytics: AnalyticsReport
    feed: FeedState


# ============================================================================
# Mapping
# ============================================================================

def to_row(request: PortabilityRequest, identity: AdminIdentity, guard: PermissionGuard) -> RequestRow:
    return RequestRow(
        request_id=request.request_id,
        full_number=request.full_number,
        first_name=request.first_name,
        email=request.email,
        source_provider=request.source_provider,
        target_provider=request.target_provider,
        status=request.status.value,
        status_label=guard.status_label(identity, request),
        can_act=guard.can_act(identity, request),
        submitted_at=format_iso(request.submitted_at) if request.submitted_at else None,
    )


def to_categorized_response(
    categorized: CategorizedRequests,
    identity: AdminIdentity,
    guard: PermissionGuard
) -> CategorizedResponse:
    def rows(requests: List[PortabilityRequest]) -> List[RequestRow]:
        return [to_row(r, identity, guard) for r in requests]
    
    return CategorizedResponse(
        role=identity.role,
        operator=identity.operator,
        outgoing=rows(categorized.outgoing),
        incoming=rows(categorized.incoming),
        validated_incoming=rows(categorized.validated_incoming),
        super_admin={
            op: SuperAdminGroupResponse(
                outgoing=rows(group.outgoing),
                validated=rows(group.validated),
            )
            for op, group in categorized.super_admin.items()
        },
    )
