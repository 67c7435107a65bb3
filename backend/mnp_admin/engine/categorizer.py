"""Request Categorizer - Partition the request snapshot by role and operator

Pure function of (requests, identity). Every bucket is ordered most recent
first; requests with an unresolvable submission time sort last and ties keep
input order.
"""
from typing import Dict, Iterable, List, Sequence

from ..domain.enums import AdminRole, Operator, RequestStatus, OPERATORS
from ..domain.models import (
    AdminIdentity, CategorizedRequests, PortabilityRequest, SuperAdminGroup
)


def sort_by_submission(requests: Iterable[PortabilityRequest]) -> List[PortabilityRequest]:
    """Stable sort, most recent submission first"""
    return sorted(requests, key=lambda r: r.submission_sort_key, reverse=True)


def categorize_requests(
    requests: Sequence[PortabilityRequest],
    identity: AdminIdentity
) -> CategorizedRequests:
    """
    Partition requests into the buckets visible to the given identity.
    
    - Guest: every bucket empty
    - ProviderAdmin(S): outgoing (source S, PENDING), incoming (target S,
      PENDING), validated_incoming (target S, Validated)
    - SuperAdmin: per source operator {outgoing: PENDING, validated: Validated},
      plus a flat outgoing list of every PENDING request
    """
    if identity.role == AdminRole.GUEST:
        return CategorizedRequests()
    if identity.role == AdminRole.SUPER_ADMIN:
        return _categorize_for_super_admin(requests)
    if identity.role == AdminRole.PROVIDER_ADMIN:
        return _categorize_for_provider(requests, identity.operator)
    raise ValueError(f"Unhandled admin role: {identity.role}")


def _categorize_for_provider(
    requests: Sequence[PortabilityRequest],
    operator: Operator
) -> CategorizedRequests:
    outgoing: List[PortabilityRequest] = []
    incoming: List[PortabilityRequest] = []
    validated_incoming: List[PortabilityRequest] = []
    
    for request in requests:
        if request.source_provider == operator and request.status == RequestStatus.PENDING:
            outgoing.append(request)
        elif request.target_provider == operator and request.status == RequestStatus.PENDING:
            incoming.append(request)
        elif request.target_provider == operator and request.status == RequestStatus.VALIDATED:
            validated_incoming.append(request)
    
    return CategorizedRequests(
        outgoing=sort_by_submission(outgoing),
        incoming=sort_by_submission(incoming),
        validated_incoming=sort_by_submission(validated_incoming),
    )


def _categorize_for_super_admin(requests: Sequence[PortabilityRequest]) -> CategorizedRequests:
    pending_by_source: Dict[Operator, List[PortabilityRequest]] = {op: [] for op in OPERATORS}
    validated_by_source: Dict[Operator, List[PortabilityRequest]] = {op: [] for op in OPERATORS}
    all_pending: List[PortabilityRequest] = []
    
    # Rejected requests are not surfaced
    for request in requests:
        if request.status == RequestStatus.PENDING:
            pending_by_source[request.source_provider].append(request)
            all_pending.append(request)
        elif request.status == RequestStatus.VALIDATED:
            validated_by_source[request.source_provider].append(request)
    
    return CategorizedRequests(
        outgoing=sort_by_submission(all_pending),
        super_admin={
            op: SuperAdminGroup(
                outgoing=sort_by_submission(pending_by_source[op]),
                validated=sort_by_submission(validated_by_source[op]),
            )
            for op in OPERATORS
        },
    )
