"""Domain Models - Pydantic schemas for requests, identities and derived views"""
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Tuple
from pydantic import BaseModel, Field, ConfigDict, ValidationError, model_validator

from .enums import (
    Operator, RequestStatus, AdminRole, ActionState, TransitionFailureReason,
    PrincipalKind, OPERATORS, parse_operator, parse_status
)
from .errors import InvalidIdentityError
from ..utils.time import resolve_timestamp, timestamp_millis


PLACEHOLDER = "N/A"


def _text(value: Any) -> Optional[str]:
    """Non-empty string value, or None for anything else"""
    if isinstance(value, str) and value:
        return value
    return None


# ============================================================================
# Portability Request
# ============================================================================

class PortabilityRequest(BaseModel):
    """A phone number moving from a source operator to a target operator"""
    model_config = ConfigDict(frozen=True)
    
    request_id: str = Field(..., description="Document ID, stable per request")
    full_number: str = Field(..., description="Ported phone number, used as owner path segment")
    source_provider: Operator = Field(..., description="Operator the number leaves")
    target_provider: Operator = Field(..., description="Operator the number joins")
    status: RequestStatus = Field(..., description="Lifecycle status")
    submitted_at: Optional[datetime] = Field(None, description="Submission time; None if unresolvable")
    email: str = Field(default=PLACEHOLDER)
    first_name: str = Field(default=PLACEHOLDER)
    owner_uid: Optional[str] = Field(None, description="Submitting user's UID if stored")
    path: Optional[str] = Field(None, description="Stored document path if known")
    processed_at: Optional[datetime] = None
    
    @property
    def submitted_millis(self) -> int:
        """Epoch milliseconds of submission; 0 when unresolvable"""
        return timestamp_millis(self.submitted_at)
    
    @property
    def submission_sort_key(self) -> Tuple[bool, int]:
        """Sort key; unresolved timestamps rank below every resolved one"""
        return (self.submitted_at is not None, self.submitted_millis)
    
    @property
    def submitted_year(self) -> Optional[int]:
        """Calendar year of submission, or None if unresolvable"""
        return self.submitted_at.year if self.submitted_at else None
    
    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> Optional["PortabilityRequest"]:
        """
        Build a request from a stored document.
        
        Display fields default to a placeholder and malformed timestamps
        resolve to None. Returns None when the document lacks a usable
        id, number, operator or status.
        """
        stored_path = _text(doc.get("path")) or _text(doc.get("_id"))
        request_id = doc.get("id") or doc.get("request_id")
        if not request_id and stored_path:
            request_id = stored_path.rsplit("/", 1)[-1]
        full_number = doc.get("fullNumber")
        source = parse_operator(doc.get("sourceProvider"))
        target = parse_operator(doc.get("targetProvider"))
        status = parse_status(doc.get("status"))
        
        if not request_id or not full_number or source is None or target is None or status is None:
            return None
        
        try:
            return cls(
                request_id=str(request_id),
                full_number=str(full_number),
                source_provider=source,
                target_provider=target,
                status=status,
                submitted_at=resolve_timestamp(doc.get("submittedAt")),
                email=_text(doc.get("email")) or PLACEHOLDER,
                first_name=_text(doc.get("firstName")) or PLACEHOLDER,
                owner_uid=_text(doc.get("firebaseUid")),
                path=stored_path,
                processed_at=resolve_timestamp(doc.get("processedAt")),
            )
        except ValidationError:
            return None


# ============================================================================
# Identity
# ============================================================================

class Principal(BaseModel):
    """Authenticated principal (anonymous or credentialed)"""
    model_config = ConfigDict(extra="forbid")
    
    principal_id: str = Field(..., description="Stable principal identifier (UID)")
    kind: PrincipalKind = Field(default=PrincipalKind.ANONYMOUS)
    email: Optional[str] = None
    display_name: Optional[str] = None
    
    @property
    def is_anonymous(self) -> bool:
        return self.kind == PrincipalKind.ANONYMOUS


class AdminIdentity(BaseModel):
    """Session-scoped admin role and operator scope"""
    model_config = ConfigDict(frozen=True)
    
    role: AdminRole = Field(default=AdminRole.GUEST)
    operator: Optional[Operator] = Field(None, description="Operator scope for ProviderAdmin")
    
    @model_validator(mode="before")
    @classmethod
    def _normalize_scope(cls, data: Any) -> Any:
        if isinstance(data, dict):
            role = data.get("role", AdminRole.GUEST)
            if role in (AdminRole.PROVIDER_ADMIN, AdminRole.PROVIDER_ADMIN.value):
                if data.get("operator") is None:
                    raise InvalidIdentityError(
                        "ProviderAdmin requires an operator scope",
                        details={"role": AdminRole.PROVIDER_ADMIN.value}
                    )
            else:
                data = {**data, "operator": None}
        return data
    
    @classmethod
    def guest(cls) -> "AdminIdentity":
        return cls(role=AdminRole.GUEST)
    
    @classmethod
    def super_admin(cls) -> "AdminIdentity":
        return cls(role=AdminRole.SUPER_ADMIN)
    
    @classmethod
    def provider_admin(cls, operator: Operator) -> "AdminIdentity":
        return cls(role=AdminRole.PROVIDER_ADMIN, operator=operator)
    
    @property
    def tracked_operators(self) -> List[Operator]:
        """Operators whose analytics this identity sees"""
        if self.role == AdminRole.SUPER_ADMIN:
            return list(OPERATORS)
        if self.role == AdminRole.PROVIDER_ADMIN:
            return [self.operator]
        if self.role == AdminRole.GUEST:
            return []
        raise ValueError(f"Unhandled admin role: {self.role}")


class LoginOption(BaseModel):
    """Selectable identity on the login screen"""
    role: AdminRole
    operator: Optional[Operator] = None
    label: str


# ============================================================================
# Derived Views
# ============================================================================

class SuperAdminGroup(BaseModel):
    """Requests grouped under one source operator"""
    outgoing: List[PortabilityRequest] = Field(default_factory=list)
    validated: List[PortabilityRequest] = Field(default_factory=list)


class CategorizedRequests(BaseModel):
    """Role-dependent partition of the request snapshot"""
    outgoing: List[PortabilityRequest] = Field(default_factory=list)
    incoming: List[PortabilityRequest] = Field(default_factory=list)
    validated_incoming: List[PortabilityRequest] = Field(default_factory=list)
    super_admin: Dict[Operator, SuperAdminGroup] = Field(default_factory=dict)


class OperatorAnalytics(BaseModel):
    """Entry/exit counters for one operator"""
    entries: int = 0
    exits: int = 0
    net: int = 0


class AnalyticsReport(BaseModel):
    """Per-year and overall entry/exit counters"""
    annual_data: Dict[int, Dict[Operator, OperatorAnalytics]] = Field(default_factory=dict)
    overall_totals: Dict[Operator, OperatorAnalytics] = Field(default_factory=dict)
    years: List[int] = Field(default_factory=list)
    operators: List[Operator] = Field(default_factory=list, description="Display order")
    has_data: bool = False


# ============================================================================
# Transitions
# ============================================================================

class TransitionOutcome(BaseModel):
    """Result of a single status transition attempt"""
    ok: bool
    request_id: str
    new_status: str
    path: Optional[str] = None
    message: str
    reason: Optional[TransitionFailureReason] = None
    remediation: Optional[str] = None


class ActionStatus(BaseModel):
    """Action state machine value for one request"""
    request_id: str
    state: ActionState = ActionState.IDLE
    reason: Optional[TransitionFailureReason] = None
    message: Optional[str] = None
    updated_at: Optional[datetime] = None
