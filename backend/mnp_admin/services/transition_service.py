"""Transition Service - Single-field status mutation with failure classification"""
from typing import Dict, Optional, Type, Union

from pymongo.errors import OperationFailure, PyMongoError

from ..config.settings import Settings
from ..domain.enums import RequestStatus, TransitionFailureReason, TRANSITION_TARGETS
from ..domain.errors import (
    DocumentNotFoundError, InvalidTransitionError, RequestNotPendingError,
    TransitionError, TransitionNotFoundError, TransitionPermissionDeniedError,
    TransitionUnknownError, DomainError
)
from ..domain.models import TransitionOutcome
from ..repositories.request_repo import RequestRepository, build_document_path
from ..utils.logger import get_logger
from ..utils.time import utc_now

logger = get_logger(__name__)

# MongoDB error codes meaning the caller may not write
PERMISSION_DENIED_CODES = frozenset({13, 18})

SECURITY_RULE_PATH = "/artifacts/{appId}/users/{userId}/portability_requests/{docId}"

PERMISSION_REMEDIATION = (
    f"Allow updates on {SECURITY_RULE_PATH} for any authenticated admin when "
    "only 'status' and 'processedAt' change and the stored status is 'PENDING'."
)

NOT_FOUND_REMEDIATION = (
    "The owner path segment must equal the stored fullNumber exactly, "
    "including any leading '+'. Check the path and the app ID."
)

OUTCOME_ERRORS: Dict[TransitionFailureReason, Type[DomainError]] = {
    TransitionFailureReason.PERMISSION_DENIED: TransitionPermissionDeniedError,
    TransitionFailureReason.NOT_FOUND: TransitionNotFoundError,
    TransitionFailureReason.UNKNOWN: TransitionUnknownError,
    TransitionFailureReason.NOT_PENDING: RequestNotPendingError,
    TransitionFailureReason.INVALID_TRANSITION: InvalidTransitionError,
}


def validate_transition_target(new_status: Union[str, RequestStatus]) -> RequestStatus:
    """
    Check the requested status before any store call.
    
    Raises:
        InvalidTransitionError: Status is not Validated or Rejected
    """
    try:
        status = RequestStatus(new_status)
    except ValueError:
        status = None
    
    if status not in TRANSITION_TARGETS:
        raise InvalidTransitionError(
            "Only 'Validated' or 'Rejected' status updates are allowed.",
            details={
                "new_status": getattr(new_status, "value", new_status),
                "allowed": [s.value for s in TRANSITION_TARGETS],
            }
        )
    return status


def outcome_error(outcome: TransitionOutcome) -> DomainError:
    """Domain error matching a failed outcome"""
    error_class = OUTCOME_ERRORS.get(outcome.reason, TransitionError)
    return error_class(outcome.message, details=outcome.model_dump(mode="json"))


class StatusTransitionDispatcher:
    """
    Applies PENDING -> Validated | Rejected to one identified document.
    
    Single attempt, no retry. Store failures are returned as a classified
    TransitionOutcome rather than raised.
    """
    
    def __init__(self, settings: Settings, repo: RequestRepository):
        self._settings = settings
        self._repo = repo
    
    def document_path(self, owner_key: str, request_id: str) -> str:
        return build_document_path(self._settings.app_id, owner_key, request_id)
    
    def apply_status_transition(
        self,
        request_id: str,
        owner_key: str,
        new_status: Union[str, RequestStatus],
        actor_id: Optional[str] = None
    ) -> TransitionOutcome:
        """
        Set status and stamp processedAt in one field-level update.
        
        Raises:
            InvalidTransitionError: Before any store call, for a bad status
        """
        status = validate_transition_target(new_status)
        path = self.document_path(owner_key, request_id)
        actor = actor_id or "ANONYMOUS"
        
        logger.info(
            f"Admin {actor} attempting to update request to {status.value}",
            extra={"request_id": request_id, "owner_key": owner_key, "path": path, "status": status.value}
        )
        
        try:
            if self._settings.require_pending_for_transition:
                current = self._repo.get_by_path(path)
                if current is None:
                    raise DocumentNotFoundError(f"No document at path {path}", details={"path": path})
                if current.status.is_terminal:
                    return self._not_pending(request_id, status, path, current.status)
            
            self._repo.update_fields(path, {
                "status": status.value,
                "processedAt": utc_now(),
            })
        except DocumentNotFoundError:
            return self._failure(
                request_id, status, path,
                TransitionFailureReason.NOT_FOUND,
                f"Error (code: not-found): document not found. The path {path} "
                "is invalid or does not exist.",
                NOT_FOUND_REMEDIATION,
            )
        except OperationFailure as e:
            if e.code in PERMISSION_DENIED_CODES:
                return self._failure(
                    request_id, status, path,
                    TransitionFailureReason.PERMISSION_DENIED,
                    f"Permission error (code: permission-denied): admin {actor} is not "
                    f"allowed to update the document at this path. Target path was: {path}.",
                    PERMISSION_REMEDIATION,
                )
            return self._unknown(request_id, status, path, e)
        except PyMongoError as e:
            return self._unknown(request_id, status, path, e)
        
        verb = "validated" if status == RequestStatus.VALIDATED else "rejected"
        logger.info(
            f"Successfully updated request to {status.value}",
            extra={"request_id": request_id, "path": path, "status": status.value}
        )
        return TransitionOutcome(
            ok=True,
            request_id=request_id,
            new_status=status.value,
            path=path,
            message=f"Request for {owner_key} {verb} successfully. The user's document has been updated.",
        )
    
    def _failure(
        self,
        request_id: str,
        status: RequestStatus,
        path: str,
        reason: TransitionFailureReason,
        message: str,
        remediation: Optional[str] = None
    ) -> TransitionOutcome:
        logger.error(
            f"Failed to update document: {message}",
            extra={"request_id": request_id, "path": path, "reason": reason.value}
        )
        return TransitionOutcome(
            ok=False,
            request_id=request_id,
            new_status=status.value,
            path=path,
            message=message,
            reason=reason,
            remediation=remediation,
        )
    
    def _unknown(
        self,
        request_id: str,
        status: RequestStatus,
        path: str,
        exc: Exception
    ) -> TransitionOutcome:
        return self._failure(
            request_id, status, path,
            TransitionFailureReason.UNKNOWN,
            f"Error while updating: {exc}",
        )
    
    def _not_pending(
        self,
        request_id: str,
        status: RequestStatus,
        path: str,
        current: RequestStatus
    ) -> TransitionOutcome:
        return self._failure(
            request_id, status, path,
            TransitionFailureReason.NOT_PENDING,
            f"Request {request_id} is already {current.value}; only PENDING requests can be processed.",
        )
