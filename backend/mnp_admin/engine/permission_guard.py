"""Permission Guard - Which admin may act on which request"""
from ..domain.enums import AdminRole, RequestStatus
from ..domain.models import AdminIdentity, PortabilityRequest


class PermissionGuard:
    """
    Action gating for status transitions
    
    Rules:
    - Only PENDING requests can be acted on
    - SuperAdmin can act on any PENDING request
    - ProviderAdmin can act only when its operator is the source
    - Guest can never act
    """
    
    def can_act(self, identity: AdminIdentity, request: PortabilityRequest) -> bool:
        """Check if identity may validate or reject the request"""
        if request.status != RequestStatus.PENDING:
            return False
        if identity.role == AdminRole.SUPER_ADMIN:
            return True
        if identity.role == AdminRole.PROVIDER_ADMIN:
            return request.source_provider == identity.operator
        if identity.role == AdminRole.GUEST:
            return False
        raise ValueError(f"Unhandled admin role: {identity.role}")
    
    def can_transition(self, identity: AdminIdentity) -> bool:
        """Check if the role may issue transitions at all"""
        return identity.role in (AdminRole.SUPER_ADMIN, AdminRole.PROVIDER_ADMIN)
    
    def status_label(self, identity: AdminIdentity, request: PortabilityRequest) -> str:
        """Display label for the request's status column"""
        if request.status == RequestStatus.PENDING:
            if self.can_act(identity, request):
                return "ACTION REQUIRED"
            return f"AWAITING {request.source_provider.value}"
        return request.status.value
