"""Analytics Aggregator - Yearly entries/exits/net per operator

A request is an exit for its source operator and an entry for its target
operator in the calendar year it was submitted. Requests whose submission
time cannot be resolved are left out of the counts.
"""
from typing import Dict, List, Sequence

from ..domain.enums import AdminRole, Operator, OPERATORS
from ..domain.models import AdminIdentity, AnalyticsReport, OperatorAnalytics, PortabilityRequest
from ..utils.logger import get_logger

logger = get_logger(__name__)


def compute_analytics(
    requests: Sequence[PortabilityRequest],
    identity: AdminIdentity
) -> AnalyticsReport:
    """
    Fold the request snapshot into per-year, per-operator counters.
    
    SuperAdmin tracks every operator and gets the annual breakdown.
    ProviderAdmin gets overall totals for its own operator only and no
    annual breakdown. Guest tracks nothing.
    """
    tracked = identity.tracked_operators
    track_all = identity.role == AdminRole.SUPER_ADMIN
    
    counts: Dict[int, Dict[Operator, List[int]]] = {}
    skipped = 0
    
    for request in requests:
        year = request.submitted_year
        if year is None:
            skipped += 1
            continue
        
        cells = counts.setdefault(year, {op: [0, 0] for op in OPERATORS})
        
        if track_all or request.source_provider in tracked:
            cells[request.source_provider][1] += 1
        if track_all or request.target_provider in tracked:
            cells[request.target_provider][0] += 1
    
    if skipped:
        logger.debug(
            f"Skipped {skipped} request(s) with unresolvable submission time",
            extra={"count": skipped}
        )
    
    annual_data = {
        year: {
            op: OperatorAnalytics(entries=entries, exits=exits, net=entries - exits)
            for op, (entries, exits) in cells.items()
        }
        for year, cells in counts.items()
    }
    
    overall_totals: Dict[Operator, OperatorAnalytics] = {}
    for op in tracked:
        entries = sum(annual_data[year][op].entries for year in annual_data)
        exits = sum(annual_data[year][op].exits for year in annual_data)
        overall_totals[op] = OperatorAnalytics(entries=entries, exits=exits, net=entries - exits)
    
    years = sorted(annual_data.keys(), reverse=True)
    
    if identity.role == AdminRole.PROVIDER_ADMIN:
        # Annual breakdown is a SuperAdmin-only view
        annual_data = {}
        years = []
        operators = [identity.operator]
    elif track_all:
        operators = sorted(OPERATORS, key=lambda op: op.value)
    else:
        operators = []
    
    has_data = any(
        overall_totals[op].entries > 0 or overall_totals[op].exits > 0
        for op in operators
    )
    
    return AnalyticsReport(
        annual_data=annual_data,
        overall_totals=overall_totals,
        years=years,
        operators=operators,
        has_data=has_data,
    )
