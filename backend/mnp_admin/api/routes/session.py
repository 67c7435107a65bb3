"""Session API Routes - Sign-in, role selection and sign-out"""
from typing import List, Optional
from fastapi import APIRouter, Depends

from ..deps import get_session, get_bearer_token_dep
from .schemas import LoginRequest, SessionResponse
from ...domain.errors import AuthFailureError
from ...domain.models import LoginOption
from ...services.session_service import AdminSession, LOGIN_OPTIONS
from ...utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter()


def _session_response(session: AdminSession) -> SessionResponse:
    principal = session.principal
    auth_error = session.auth_error
    return SessionResponse(
        auth_ready=session.auth_ready,
        principal_id=principal.principal_id if principal else None,
        principal_kind=principal.kind.value if principal else None,
        role=session.identity.role,
        operator=session.identity.operator,
        auth_error=auth_error.message if auth_error else None,
    )


@router.get("", response_model=SessionResponse)
async def get_session_state(session: AdminSession = Depends(get_session)):
    """Current principal, role and operator scope."""
    return _session_response(session)


@router.get("/options", response_model=List[LoginOption])
async def get_login_options():
    """Identities selectable on the login screen."""
    return LOGIN_OPTIONS


@router.post("/login", response_model=SessionResponse)
async def login(
    body: LoginRequest,
    session: AdminSession = Depends(get_session)
):
    """
    Role selection login.
    
    The chosen role and operator are persisted and restored after a restart.
    """
    session.select_role(body.role, body.operator)
    return _session_response(session)


@router.post("/token", response_model=SessionResponse)
async def login_with_token(
    token: Optional[str] = Depends(get_bearer_token_dep),
    session: AdminSession = Depends(get_session)
):
    """
    Credentialed sign-in.
    
    - 401 if the token is rejected (the session stays anonymous)
    - 403 if the account has no admin role (the session is signed out)
    """
    if not token:
        raise AuthFailureError("Authorization header is missing")
    session.sign_in_with_token(token)
    return _session_response(session)


@router.post("/logout", response_model=SessionResponse)
async def logout(session: AdminSession = Depends(get_session)):
    """Sign out and clear the persisted role and operator."""
    session.sign_out()
    return _session_response(session)
