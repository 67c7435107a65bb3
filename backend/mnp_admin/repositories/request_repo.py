"""Request Repository - Data access for portability request documents

Each document is keyed by its full store path,
``artifacts/{app_id}/users/{owner_key}/portability_requests/{request_id}``,
so the whole collection is the flat group of every user's sub-collection.
Stored field names (fullNumber, sourceProvider, ...) are kept as written by
the submission flow.
"""
from typing import Any, Dict, Iterable, List, Mapping, Optional
from pymongo.collection import Collection
from pymongo import DESCENDING

from ..domain.enums import Operator, RequestStatus
from ..domain.errors import DocumentNotFoundError
from ..domain.models import PortabilityRequest
from ..utils.logger import get_logger

logger = get_logger(__name__)


def build_document_path(app_id: str, owner_key: str, request_id: str) -> str:
    """Document path of a request; owner_key is the full number as stored, leading '+' included"""
    return f"artifacts/{app_id}/users/{owner_key}/portability_requests/{request_id}"


def documents_to_requests(docs: Iterable[Mapping[str, Any]]) -> List[PortabilityRequest]:
    """Map raw documents to requests, dropping the ones that cannot be used"""
    requests = []
    for doc in docs:
        request = PortabilityRequest.from_document(doc)
        if request is None:
            logger.warning(
                "Skipping malformed portability request document",
                extra={"path": doc.get("_id"), "status": doc.get("status")}
            )
            continue
        requests.append(request)
    return requests


class RequestRepository:
    """Repository for portability request documents"""
    
    def __init__(self, collection: Collection):
        self._requests: Collection = collection
    
    def query_by_target_and_status(
        self,
        operator: Operator,
        status: RequestStatus
    ) -> List[PortabilityRequest]:
        """One-shot fetch of requests joining an operator in a given status"""
        cursor = self._requests.find(
            {"targetProvider": operator.value, "status": status.value}
        ).sort("submittedAt", DESCENDING)
        return documents_to_requests(cursor)
    
    def get_by_path(self, path: str) -> Optional[PortabilityRequest]:
        """Get a request by its document path"""
        doc = self._requests.find_one({"_id": path})
        if doc:
            return PortabilityRequest.from_document(doc)
        return None
    
    def update_fields(self, path: str, fields: Dict[str, Any]) -> None:
        """
        Single-document partial update.
        
        Raises:
            DocumentNotFoundError: If no document exists at the path
            pymongo.errors.PyMongoError: On store failures
        """
        result = self._requests.update_one({"_id": path}, {"$set": fields})
        if result.matched_count == 0:
            raise DocumentNotFoundError(
                f"No document at path {path}",
                details={"path": path}
            )
        logger.info(
            "Updated request document",
            extra={"path": path, "status": fields.get("status")}
        )
    
    def insert_document(self, path: str, doc: Dict[str, Any]) -> None:
        """Insert a raw request document at the given path"""
        self._requests.insert_one({**doc, "_id": path, "path": path})
    
    def count(self) -> int:
        return self._requests.count_documents({})
