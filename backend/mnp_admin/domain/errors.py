"""Domain Errors - Centralized Exception Hierarchy"""
from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base domain error - all errors extend this"""
    
    error_code: str = "DOMAIN_ERROR"
    http_status: int = 400
    
    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        if error_code:
            self.error_code = error_code
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert error to API response dict"""
        return {
            "error": {
                "code": self.error_code,
                "message": self.message,
                "details": self.details
            }
        }


# Authentication & Authorization Errors
class AuthenticationError(DomainError):
    """Token missing, invalid, or expired"""
    error_code = "AUTHENTICATION_ERROR"
    http_status = 401


class AuthFailureError(AuthenticationError):
    """Sign-in failed; the session falls back to an anonymous principal"""
    error_code = "AUTH_FAILURE"


class AuthorizationError(DomainError):
    """User lacks permission for action"""
    error_code = "AUTHORIZATION_ERROR"
    http_status = 403


class RoleNotFoundError(AuthorizationError):
    """Authenticated principal has no admin role; session is signed out"""
    error_code = "ROLE_NOT_FOUND"


class RoleNotPermittedError(AuthorizationError):
    """Current role may not perform this action"""
    error_code = "ROLE_NOT_PERMITTED"


# Validation Errors
class ValidationError(DomainError):
    """Input validation failed"""
    error_code = "VALIDATION_ERROR"
    http_status = 400


class InvalidIdentityError(ValidationError):
    """Role/operator combination is not valid"""
    error_code = "INVALID_IDENTITY"


class InvalidTransitionError(ValidationError):
    """Requested status is not a permitted transition target"""
    error_code = "INVALID_TRANSITION"


# Not Found Errors
class NotFoundError(DomainError):
    """Resource not found"""
    error_code = "NOT_FOUND"
    http_status = 404


class DocumentNotFoundError(NotFoundError):
    """Document path did not resolve to a stored document"""
    error_code = "DOCUMENT_NOT_FOUND"


# Conflict Errors
class ConflictError(DomainError):
    """Resource conflict"""
    error_code = "CONFLICT"
    http_status = 409


class RequestNotPendingError(ConflictError):
    """Transition attempted on a request that is no longer PENDING"""
    error_code = "REQUEST_NOT_PENDING"


class ActionInFlightError(ConflictError):
    """A transition for this request is already in flight"""
    error_code = "ACTION_IN_FLIGHT"


# Transition failures (classified store errors)
class TransitionError(DomainError):
    """Status transition failed at the store"""
    error_code = "TRANSITION_ERROR"
    http_status = 502


class TransitionPermissionDeniedError(TransitionError):
    """Caller lacks write authorization at the derived document path"""
    error_code = "TRANSITION_PERMISSION_DENIED"
    http_status = 403


class TransitionNotFoundError(TransitionError):
    """Derived document path does not resolve to an existing document"""
    error_code = "TRANSITION_NOT_FOUND"
    http_status = 404


class TransitionUnknownError(TransitionError):
    """Any other transition failure"""
    error_code = "TRANSITION_UNKNOWN"


# External Service Errors
class ExternalServiceError(DomainError):
    """External service failure"""
    error_code = "EXTERNAL_SERVICE_ERROR"
    http_status = 502


class SubscriptionFailureError(ExternalServiceError):
    """Live request feed is broken"""
    error_code = "SUBSCRIPTION_FAILURE"
    http_status = 503
