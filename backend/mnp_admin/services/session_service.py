"""Session Service - Admin identity for the running console session"""
from typing import Callable, List, Optional

from ..config.settings import Settings
from ..domain.enums import AdminRole, Operator
from ..domain.errors import AuthFailureError, RoleNotFoundError, RoleNotPermittedError
from ..domain.models import AdminIdentity, LoginOption, Principal
from ..repositories.session_state_repo import SessionStateStore
from .identity_service import IdentityProvider
from ..utils.logger import get_logger

logger = get_logger(__name__)

IdentityListener = Callable[[AdminIdentity], None]


LOGIN_OPTIONS: List[LoginOption] = [
    LoginOption(role=AdminRole.SUPER_ADMIN, label="Super Administrator (all operators)"),
    LoginOption(role=AdminRole.PROVIDER_ADMIN, operator=Operator.ORANGE, label="Admin ORANGE"),
    LoginOption(role=AdminRole.PROVIDER_ADMIN, operator=Operator.AIRTEL, label="Admin AIRTEL"),
    LoginOption(role=AdminRole.PROVIDER_ADMIN, operator=Operator.VODACOM, label="Admin VODACOM"),
    LoginOption(role=AdminRole.PROVIDER_ADMIN, operator=Operator.AFRICELL, label="Admin AFRICELL"),
]


class AdminSession:
    """
    Holds the principal and admin identity of the console session.
    
    The chosen role and operator scope are persisted through the
    SessionStateStore and restored on start; sign-out clears them.
    """
    
    def __init__(
        self,
        settings: Settings,
        identity_provider: IdentityProvider,
        state_store: SessionStateStore
    ):
        self._settings = settings
        self._identity_provider = identity_provider
        self._state_store = state_store
        self._identity: AdminIdentity = AdminIdentity.guest()
        self._listeners: List[IdentityListener] = []
        self.auth_ready = False
    
    @property
    def identity(self) -> AdminIdentity:
        return self._identity
    
    @property
    def principal(self) -> Optional[Principal]:
        return self._identity_provider.current
    
    @property
    def auth_error(self) -> Optional[AuthFailureError]:
        return self._identity_provider.last_auth_error
    
    def on_identity_changed(self, listener: IdentityListener) -> Callable[[], None]:
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)
    
    def _set_identity(self, identity: AdminIdentity) -> None:
        self._identity = identity
        for listener in list(self._listeners):
            listener(identity)
    
    def start(self) -> None:
        """Restore the persisted identity and authenticate the principal"""
        stored = self._state_store.load()
        if stored.role != AdminRole.GUEST:
            logger.info(
                "Restored persisted admin identity",
                extra={"role": stored.role.value, "operator": stored.operator}
            )
            self._set_identity(stored)
        
        self._identity_provider.authenticate(self._settings.initial_auth_token)
        self.auth_ready = True
    
    def select_role(self, role: AdminRole, operator: Optional[Operator] = None) -> AdminIdentity:
        """Role-selection login; persists the chosen identity"""
        if not self._settings.allow_role_selection:
            raise RoleNotPermittedError("Role selection login is disabled")
        if self.principal is None:
            raise AuthFailureError("No authenticated principal")
        if role == AdminRole.GUEST:
            raise RoleNotPermittedError("Guest cannot be selected as an admin role")
        
        identity = AdminIdentity(role=role, operator=operator)
        self._state_store.save(identity)
        self._set_identity(identity)
        logger.info(
            "Admin role selected",
            extra={"role": role.value, "operator": operator.value if operator else None}
        )
        return identity
    
    def sign_in_with_token(self, token: str) -> AdminIdentity:
        """
        Credentialed sign-in followed by a role lookup.
        
        Raises:
            AuthFailureError: Token rejected; the anonymous principal remains
            RoleNotFoundError: No admin role for the principal; session is signed out
        """
        principal = self._identity_provider.sign_in_with_token(token)
        identity = self._identity_provider.role_lookup(principal.principal_id)
        
        if identity is None:
            logger.error(
                "User signed in but has no admin role. Signing out.",
                extra={"principal_id": principal.principal_id}
            )
            self.sign_out()
            raise RoleNotFoundError(
                "No admin role found for this account",
                details={"principal_id": principal.principal_id}
            )
        
        self._state_store.save(identity)
        self._set_identity(identity)
        return identity
    
    def sign_out(self) -> None:
        """Sign out and clear the persisted role and operator"""
        self._identity_provider.sign_out()
        self._state_store.clear()
        self._set_identity(AdminIdentity.guest())
