"""Admin Role Repository - Role documents keyed by principal ID"""
from typing import Any, Dict, List, Mapping, Optional
from pymongo.collection import Collection

from ..domain.enums import AdminRole, parse_operator, operator_from_legacy_role
from ..domain.errors import InvalidIdentityError
from ..domain.models import AdminIdentity
from ..utils.logger import get_logger
from ..utils.time import utc_now

logger = get_logger(__name__)


def parse_role_document(doc: Mapping[str, Any]) -> Optional[AdminIdentity]:
    """
    Parse an admin_roles document into an identity.
    
    Accepts {"role": "SuperAdmin"}, {"role": "ProviderAdmin", "operator": "ORANGE"}
    and the legacy strings "SUPER_ADMIN" and "<OPERATOR>_ADMIN".
    Returns None for anything else.
    """
    raw_role = doc.get("role")
    if not isinstance(raw_role, str):
        return None
    
    if raw_role in (AdminRole.SUPER_ADMIN.value, "SUPER_ADMIN"):
        return AdminIdentity.super_admin()
    
    if raw_role == AdminRole.PROVIDER_ADMIN.value:
        operator = parse_operator(doc.get("operator"))
        if operator is None:
            return None
        return AdminIdentity.provider_admin(operator)
    
    legacy_operator = operator_from_legacy_role(raw_role)
    if legacy_operator is not None:
        return AdminIdentity.provider_admin(legacy_operator)
    
    return None


class AdminRoleRepository:
    """Repository for admin role lookups"""
    
    def __init__(self, collection: Collection):
        self._roles: Collection = collection
    
    def get_identity(self, principal_id: str) -> Optional[AdminIdentity]:
        """Role lookup for a principal; None when absent or unparseable"""
        doc = self._roles.find_one({"_id": principal_id})
        if not doc:
            logger.warning(
                "Admin role document not found",
                extra={"principal_id": principal_id}
            )
            return None
        
        identity = parse_role_document(doc)
        if identity is None:
            logger.warning(
                f"Unrecognized admin role value: {doc.get('role')!r}",
                extra={"principal_id": principal_id}
            )
        return identity
    
    def set_identity(self, principal_id: str, identity: AdminIdentity) -> None:
        """Grant or replace a principal's admin role"""
        if identity.role == AdminRole.GUEST:
            raise InvalidIdentityError("Guest is not a grantable admin role")
        
        doc: Dict[str, Any] = {
            "role": identity.role.value,
            "operator": identity.operator.value if identity.operator else None,
            "updated_at": utc_now(),
        }
        self._roles.update_one({"_id": principal_id}, {"$set": doc}, upsert=True)
        logger.info(
            "Granted admin role",
            extra={"principal_id": principal_id, "role": identity.role.value}
        )
    
    def list_roles(self) -> List[Dict[str, Any]]:
        """All role documents"""
        return list(self._roles.find({}))
