"""Tests for entry/exit analytics"""
from mnp_admin.domain.enums import Operator, RequestStatus, OPERATORS
from mnp_admin.domain.models import AdminIdentity
from mnp_admin.engine.analytics import compute_analytics

from .factories import at, make_request

ORANGE, AIRTEL, VODACOM, AFRICELL = OPERATORS


def test_super_admin_annual_breakdown(super_admin):
    requests = [
        make_request("r1", ORANGE, AIRTEL, RequestStatus.VALIDATED, at(2023, 5, 1)),
        make_request("r2", AIRTEL, ORANGE, RequestStatus.PENDING, at(2024, 2, 1)),
        make_request("r3", ORANGE, VODACOM, RequestStatus.REJECTED, at(2024, 6, 1)),
    ]
    
    report = compute_analytics(requests, super_admin)
    
    assert report.years == [2024, 2023]
    assert report.annual_data[2023][ORANGE].exits == 1
    assert report.annual_data[2023][AIRTEL].entries == 1
    assert report.annual_data[2024][ORANGE].entries == 1
    assert report.annual_data[2024][ORANGE].exits == 1
    assert report.annual_data[2024][ORANGE].net == 0
    assert report.annual_data[2024][VODACOM].entries == 1
    # Every operator has a cell in every year
    assert set(report.annual_data[2023].keys()) == set(OPERATORS)
    assert report.annual_data[2023][AFRICELL].entries == 0
    
    assert report.overall_totals[ORANGE].entries == 1
    assert report.overall_totals[ORANGE].exits == 2
    assert report.overall_totals[ORANGE].net == -1
    assert report.operators == sorted(OPERATORS, key=lambda op: op.value)
    assert report.has_data is True


def test_provider_admin_sees_own_totals_only(orange_admin):
    requests = [
        make_request("r1", ORANGE, AIRTEL, RequestStatus.VALIDATED, at(2023)),
        make_request("r2", AIRTEL, ORANGE, RequestStatus.PENDING, at(2024)),
        make_request("r3", AIRTEL, VODACOM, RequestStatus.PENDING, at(2024)),
    ]
    
    report = compute_analytics(requests, orange_admin)
    
    assert list(report.overall_totals.keys()) == [ORANGE]
    assert report.overall_totals[ORANGE].entries == 1
    assert report.overall_totals[ORANGE].exits == 1
    assert report.overall_totals[ORANGE].net == 0
    assert report.annual_data == {}
    assert report.years == []
    assert report.operators == [ORANGE]


def test_guest_tracks_nothing(guest):
    requests = [make_request("r1", ORANGE, AIRTEL, submitted_at=at(2024))]
    
    report = compute_analytics(requests, guest)
    
    assert report.overall_totals == {}
    assert report.operators == []
    assert report.has_data is False


def test_unresolved_timestamps_are_not_counted(super_admin):
    requests = [
        make_request("r1", ORANGE, AIRTEL, submitted_at=None),
        make_request("r2", ORANGE, AIRTEL, submitted_at=at(2024)),
    ]
    
    report = compute_analytics(requests, super_admin)
    
    assert report.years == [2024]
    assert report.overall_totals[ORANGE].exits == 1
    assert report.overall_totals[AIRTEL].entries == 1


def test_no_requests_has_no_data(super_admin):
    report = compute_analytics([], super_admin)
    
    assert report.years == []
    assert report.has_data is False
    assert all(t.entries == 0 and t.exits == 0 for t in report.overall_totals.values())


def test_totals_balance_across_operators(super_admin):
    requests = [
        make_request(f"r{i}", src, dst, submitted_at=at(2020 + i % 3))
        for i, (src, dst) in enumerate([
            (ORANGE, AIRTEL), (AIRTEL, VODACOM), (VODACOM, AFRICELL),
            (AFRICELL, ORANGE), (ORANGE, VODACOM), (AIRTEL, ORANGE),
        ])
    ]
    
    report = compute_analytics(requests, super_admin)
    
    totals = report.overall_totals.values()
    assert sum(t.entries for t in totals) == len(requests)
    assert sum(t.exits for t in totals) == len(requests)
    assert sum(t.net for t in totals) == 0
    for year, cells in report.annual_data.items():
        for cell in cells.values():
            assert cell.net == cell.entries - cell.exits


def test_provider_totals_match_super_admin_view():
    requests = [
        make_request("r1", ORANGE, AIRTEL, submitted_at=at(2023)),
        make_request("r2", AIRTEL, ORANGE, submitted_at=at(2024)),
        make_request("r3", VODACOM, AIRTEL, submitted_at=at(2024)),
    ]
    
    overall = compute_analytics(requests, AdminIdentity.super_admin()).overall_totals
    
    for op in OPERATORS:
        scoped = compute_analytics(requests, AdminIdentity.provider_admin(op)).overall_totals
        assert scoped[op] == overall[op]
