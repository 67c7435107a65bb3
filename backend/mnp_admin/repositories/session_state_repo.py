"""Session State Store - Persisted admin role and operator scope

Survives restarts; cleared on sign-out. Two fixed keys are stored in a
small JSON file.
"""
import json
import os
from typing import Dict

from ..domain.enums import AdminRole, parse_operator
from ..domain.errors import InvalidIdentityError
from ..domain.models import AdminIdentity
from ..utils.logger import get_logger

logger = get_logger(__name__)

ROLE_KEY = "adminRole"
OPERATOR_KEY = "adminOperator"


class SessionStateStore:
    """File-backed key/value store for the session's admin identity"""
    
    def __init__(self, path: str):
        self._path = path
    
    def _read(self) -> Dict[str, str]:
        if not os.path.exists(self._path):
            return {}
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Unreadable session state at {self._path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}
    
    def _write(self, data: Dict[str, str]) -> None:
        directory = os.path.dirname(self._path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self._path, "w", encoding="utf-8") as f:
            json.dump(data, f)
    
    def load(self) -> AdminIdentity:
        """Stored identity; Guest when nothing usable is stored"""
        data = self._read()
        stored_role = data.get(ROLE_KEY)
        if not stored_role or stored_role == AdminRole.GUEST.value:
            return AdminIdentity.guest()
        
        try:
            role = AdminRole(stored_role)
            operator = parse_operator(data.get(OPERATOR_KEY))
            return AdminIdentity(role=role, operator=operator)
        except (ValueError, InvalidIdentityError) as e:
            logger.warning(f"Ignoring invalid stored session state: {e}")
            return AdminIdentity.guest()
    
    def save(self, identity: AdminIdentity) -> None:
        data: Dict[str, str] = {ROLE_KEY: identity.role.value}
        if identity.operator is not None:
            data[OPERATOR_KEY] = identity.operator.value
        self._write(data)
    
    def clear(self) -> None:
        data = self._read()
        data.pop(ROLE_KEY, None)
        data.pop(OPERATOR_KEY, None)
        self._write(data)
    