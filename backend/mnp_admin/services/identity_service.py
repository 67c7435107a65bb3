"""Identity Service - Principal authentication and admin role lookup"""
from typing import Any, Callable, Dict, List, Optional
import jwt
from pymongo.errors import PyMongoError

from ..config.settings import Settings
from ..domain.enums import PrincipalKind
from ..domain.errors import AuthFailureError
from ..domain.models import AdminIdentity, Principal
from ..repositories.admin_role_repo import AdminRoleRepository
from ..utils.idgen import generate_anonymous_principal_id
from ..utils.logger import get_logger

logger = get_logger(__name__)

PrincipalListener = Callable[[Optional[Principal]], None]


class IdentityProvider:
    """
    Issues the current principal and looks up admin roles.
    
    A credentialed sign-in verifies a bearer token; when it fails the
    provider falls back to an anonymous principal. Principal changes are
    pushed to registered listeners.
    """
    
    def __init__(self, settings: Settings, role_repo: AdminRoleRepository):
        self._settings = settings
        self._role_repo = role_repo
        self._principal: Optional[Principal] = None
        self._listeners: List[PrincipalListener] = []
        self.last_auth_error: Optional[AuthFailureError] = None
    
    @property
    def current(self) -> Optional[Principal]:
        return self._principal
    
    def on_principal_changed(self, listener: PrincipalListener) -> Callable[[], None]:
        """Register a listener; returns an unsubscribe callable"""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)
    
    def _set_principal(self, principal: Optional[Principal]) -> None:
        self._principal = principal
        for listener in list(self._listeners):
            listener(principal)
    
    # =========================================================================
    # Authentication
    # =========================================================================
    
    def verify_token(self, token: str) -> Principal:
        """
        Verify a bearer token and build a credentialed principal.
        
        Raises:
            AuthFailureError: If the token is missing or invalid
        """
        if not token:
            raise AuthFailureError("Token is missing")
        
        if token.startswith("Bearer "):
            token = token[7:]
        
        try:
            if self._settings.jwt_secret:
                claims = jwt.decode(
                    token,
                    self._settings.jwt_secret,
                    algorithms=[self._settings.jwt_algorithm],
                    options={"verify_aud": False},
                )
            elif self._settings.is_development:
                # No secret configured: accept unsigned claims in development only
                claims = jwt.decode(
                    token,
                    options={"verify_signature": False, "verify_exp": True, "verify_aud": False},
                )
            else:
                raise AuthFailureError("Token verification is not configured")
        except jwt.ExpiredSignatureError:
            logger.warning("Token expired")
            raise AuthFailureError("Token has expired")
        except jwt.PyJWTError as e:
            logger.warning(f"JWT validation error: {e}")
            raise AuthFailureError(f"Invalid token: {str(e)}")
        
        return self._principal_from_claims(claims)
    
    def _principal_from_claims(self, claims: Dict[str, Any]) -> Principal:
        principal_id = claims.get("uid") or claims.get("user_id") or claims.get("sub")
        if not principal_id:
            logger.warning(f"No subject in token claims. Available claims: {list(claims.keys())}")
            raise AuthFailureError("Unable to determine principal from token")
        
        return Principal(
            principal_id=str(principal_id),
            kind=PrincipalKind.CREDENTIALED,
            email=claims.get("email"),
            display_name=claims.get("name"),
        )
    
    def sign_in_anonymously(self) -> Principal:
        principal = Principal(principal_id=generate_anonymous_principal_id())
        self._set_principal(principal)
        logger.info("Signed in anonymously", extra={"principal_id": principal.principal_id})
        return principal
    
    def sign_in_with_token(self, token: str) -> Principal:
        """Credentialed sign-in; raises AuthFailureError and leaves the current principal as is"""
        principal = self.verify_token(token)
        self.last_auth_error = None
        self._set_principal(principal)
        logger.info("Signed in with token", extra={"principal_id": principal.principal_id})
        return principal
    
    def authenticate(self, token: Optional[str] = None) -> Principal:
        """
        Sign in with the token if given, otherwise anonymously.
        
        A failed token sign-in is recorded in last_auth_error and the
        principal falls back to anonymous.
        """
        if token:
            try:
                return self.sign_in_with_token(token)
            except AuthFailureError as e:
                logger.warning(f"Primary sign-in failed, falling back to anonymous: {e.message}")
                self.last_auth_error = e
        return self.sign_in_anonymously()
    
    def sign_out(self) -> Principal:
        """Drop the current principal; a fresh anonymous principal takes its place"""
        previous = self._principal
        self._set_principal(None)
        if previous:
            logger.info("Signed out", extra={"principal_id": previous.principal_id})
        return self.sign_in_anonymously()
    
    # =========================================================================
    # Role Lookup
    # =========================================================================
    
    def role_lookup(self, principal_id: str) -> Optional[AdminIdentity]:
        """Admin role for a principal, or None when absent or unreadable"""
        try:
            return self._role_repo.get_identity(principal_id)
        except PyMongoError as e:
            logger.error(f"Error fetching admin role: {e}", extra={"principal_id": principal_id})
            return None
