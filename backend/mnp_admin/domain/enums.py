"""Domain Enumerations - Operators, roles and request lifecycle"""
from enum import Enum
from typing import Optional, Tuple


class Operator(str, Enum):
    """Telecom operators taking part in number portability"""
    ORANGE = "ORANGE"
    AIRTEL = "AIRTEL"
    VODACOM = "VODACOM"
    AFRICELL = "AFRICELL"


# Canonical operator order
OPERATORS: Tuple[Operator, ...] = (
    Operator.ORANGE,
    Operator.AIRTEL,
    Operator.VODACOM,
    Operator.AFRICELL,
)


class RequestStatus(str, Enum):
    """Portability request lifecycle; PENDING is initial, the others terminal"""
    PENDING = "PENDING"
    VALIDATED = "Validated"
    REJECTED = "Rejected"
    
    @property
    def is_terminal(self) -> bool:
        return self is not RequestStatus.PENDING


# Statuses an admin may set through a transition
TRANSITION_TARGETS: Tuple[RequestStatus, ...] = (
    RequestStatus.VALIDATED,
    RequestStatus.REJECTED,
)


class AdminRole(str, Enum):
    """Admin roles in the console"""
    SUPER_ADMIN = "SuperAdmin"        # Sees and acts on every operator
    PROVIDER_ADMIN = "ProviderAdmin"  # Scoped to a single operator
    GUEST = "Guest"                   # Not signed in with a role


class TransitionFailureReason(str, Enum):
    """Classified reasons a status transition failed"""
    PERMISSION_DENIED = "PermissionDenied"
    NOT_FOUND = "NotFound"
    UNKNOWN = "Unknown"
    INVALID_TRANSITION = "InvalidTransition"
    NOT_PENDING = "NotPending"


class ActionState(str, Enum):
    """In-flight state of a transition for one request"""
    IDLE = "Idle"
    PENDING = "Pending"
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"


class FeedStatus(str, Enum):
    """Live request feed state"""
    STOPPED = "STOPPED"
    LOADING = "LOADING"
    LIVE = "LIVE"
    FAILED = "FAILED"


class PrincipalKind(str, Enum):
    """How the current principal was authenticated"""
    ANONYMOUS = "ANONYMOUS"
    CREDENTIALED = "CREDENTIALED"


def parse_operator(value: Optional[str]) -> Optional[Operator]:
    """Parse an operator identifier; returns None for unknown values"""
    if value is None:
        return None
    try:
        return Operator(str(value).strip().upper())
    except ValueError:
        return None


def parse_status(value: Optional[str]) -> Optional[RequestStatus]:
    """Parse a stored request status; returns None for unknown values"""
    if value is None:
        return None
    try:
        return RequestStatus(value)
    except ValueError:
        return None


def operator_from_legacy_role(value: Optional[str]) -> Optional[Operator]:
    """Map a legacy role string such as 'ORANGE_ADMIN' to its operator"""
    if not value or not value.upper().endswith("_ADMIN"):
        return None
    return parse_operator(value.upper()[: -len("_ADMIN")])
