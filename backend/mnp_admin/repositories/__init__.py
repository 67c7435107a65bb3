"""Repository modules - Data access layer"""
from .mongo_client import MongoContext
from .async_mongo import AsyncMongoContext
from .request_repo import RequestRepository, build_document_path
from .admin_role_repo import AdminRoleRepository
from .session_state_repo import SessionStateStore

__all__ = [
    "MongoContext",
    "AsyncMongoContext",
    "RequestRepository",
    "build_document_path",
    "AdminRoleRepository",
    "SessionStateStore",
]
