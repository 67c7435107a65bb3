"""Tests for request categorization"""
from mnp_admin.domain.enums import Operator, RequestStatus, OPERATORS
from mnp_admin.domain.models import AdminIdentity
from mnp_admin.engine.categorizer import categorize_requests, sort_by_submission

from .factories import at, make_request

ORANGE, AIRTEL, VODACOM, AFRICELL = OPERATORS


def ids(requests):
    return [r.request_id for r in requests]


class TestProviderAdmin:
    
    def test_buckets_for_own_operator(self, orange_admin):
        requests = [
            make_request("r1", ORANGE, AIRTEL, RequestStatus.PENDING, at(2024, 1, 1)),
            make_request("r2", AIRTEL, ORANGE, RequestStatus.PENDING, at(2024, 2, 1)),
            make_request("r3", VODACOM, ORANGE, RequestStatus.VALIDATED, at(2024, 3, 1)),
            make_request("r4", ORANGE, VODACOM, RequestStatus.REJECTED, at(2024, 4, 1)),
            make_request("r5", AIRTEL, VODACOM, RequestStatus.PENDING, at(2024, 5, 1)),
        ]
        
        result = categorize_requests(requests, orange_admin)
        
        assert ids(result.outgoing) == ["r1"]
        assert ids(result.incoming) == ["r2"]
        assert ids(result.validated_incoming) == ["r3"]
        assert result.super_admin == {}
    
    def test_same_source_and_target_lands_in_outgoing_only(self, orange_admin):
        requests = [make_request("r1", ORANGE, ORANGE, RequestStatus.PENDING, at(2024))]
        
        result = categorize_requests(requests, orange_admin)
        
        assert ids(result.outgoing) == ["r1"]
        assert result.incoming == []
    
    def test_validated_outgoing_is_not_surfaced(self, orange_admin):
        requests = [make_request("r1", ORANGE, AIRTEL, RequestStatus.VALIDATED, at(2024))]
        
        result = categorize_requests(requests, orange_admin)
        
        assert result.outgoing == [] and result.incoming == [] and result.validated_incoming == []


class TestSuperAdmin:
    
    def test_groups_every_operator(self, super_admin):
        requests = [
            make_request("r1", ORANGE, AIRTEL, RequestStatus.PENDING, at(2024, 1, 1)),
            make_request("r2", AIRTEL, ORANGE, RequestStatus.PENDING, at(2024, 2, 1)),
            make_request("r3", ORANGE, VODACOM, RequestStatus.VALIDATED, at(2024, 3, 1)),
            make_request("r4", AFRICELL, ORANGE, RequestStatus.REJECTED, at(2024, 4, 1)),
        ]
        
        result = categorize_requests(requests, super_admin)
        
        assert set(result.super_admin.keys()) == set(OPERATORS)
        assert ids(result.super_admin[ORANGE].outgoing) == ["r1"]
        assert ids(result.super_admin[ORANGE].validated) == ["r3"]
        assert ids(result.super_admin[AIRTEL].outgoing) == ["r2"]
        assert result.super_admin[VODACOM].outgoing == []
        assert result.super_admin[AFRICELL].outgoing == []
        assert result.super_admin[AFRICELL].validated == []
        # Flat pending list, most recent first
        assert ids(result.outgoing) == ["r2", "r1"]
    
    def test_rejected_requests_are_skipped(self, super_admin):
        requests = [make_request("r1", ORANGE, AIRTEL, RequestStatus.REJECTED, at(2024))]
        
        result = categorize_requests(requests, super_admin)
        
        assert result.outgoing == []
        assert all(not g.outgoing and not g.validated for g in result.super_admin.values())


class TestGuest:
    
    def test_everything_empty(self, guest):
        requests = [make_request("r1", ORANGE, AIRTEL, RequestStatus.PENDING, at(2024))]
        
        result = categorize_requests(requests, guest)
        
        assert result.outgoing == []
        assert result.incoming == []
        assert result.validated_incoming == []
        assert result.super_admin == {}


class TestOrdering:
    
    def test_most_recent_first(self):
        requests = [
            make_request("old", ORANGE, AIRTEL, submitted_at=at(2022)),
            make_request("new", ORANGE, AIRTEL, submitted_at=at(2024)),
            make_request("mid", ORANGE, AIRTEL, submitted_at=at(2023)),
        ]
        
        assert ids(sort_by_submission(requests)) == ["new", "mid", "old"]
    
    def test_unresolved_timestamps_sort_last_and_keep_input_order(self):
        requests = [
            make_request("a", ORANGE, AIRTEL, submitted_at=None),
            make_request("dated", ORANGE, AIRTEL, submitted_at=at(2020)),
            make_request("b", ORANGE, AIRTEL, submitted_at=None),
        ]
        
        assert ids(sort_by_submission(requests)) == ["dated", "a", "b"]
    
    def test_pre_epoch_submission_still_outranks_missing_timestamp(self):
        requests = [
            make_request("missing", ORANGE, AIRTEL, submitted_at=None),
            make_request("old", ORANGE, AIRTEL, submitted_at=at(1965)),
        ]
        
        assert ids(sort_by_submission(requests)) == ["old", "missing"]
    
    def test_pure_function_of_inputs(self, orange_admin):
        requests = [
            make_request("r1", ORANGE, AIRTEL, submitted_at=at(2024)),
            make_request("r2", AIRTEL, ORANGE, submitted_at=at(2023)),
        ]
        
        first = categorize_requests(requests, orange_admin)
        second = categorize_requests(list(requests), orange_admin)
        
        assert first == second
    
    def test_identity_change_alone_changes_buckets(self):
        requests = [make_request("r1", ORANGE, AIRTEL, submitted_at=at(2024))]
        
        as_orange = categorize_requests(requests, AdminIdentity.provider_admin(Operator.ORANGE))
        as_airtel = categorize_requests(requests, AdminIdentity.provider_admin(Operator.AIRTEL))
        
        assert ids(as_orange.outgoing) == ["r1"]
        assert ids(as_airtel.incoming) == ["r1"]


def mixed_snapshot():
    statuses = [RequestStatus.PENDING, RequestStatus.VALIDATED, RequestStatus.REJECTED]
    requests = []
    for i, (src, dst) in enumerate((s, d) for s in OPERATORS for d in OPERATORS if s != d):
        submitted = at(2021 + i % 4, 1 + i % 12) if i % 5 else None
        requests.append(make_request(f"r{i}", src, dst, statuses[i % 3], submitted))
    return requests


class TestProperties:
    
    def test_provider_buckets_are_disjoint(self):
        requests = mixed_snapshot()
        
        for op in OPERATORS:
            result = categorize_requests(requests, AdminIdentity.provider_admin(op))
            buckets = [set(ids(result.outgoing)), set(ids(result.incoming)), set(ids(result.validated_incoming))]
            
            assert not (buckets[0] & buckets[1])
            assert not (buckets[0] & buckets[2])
            assert not (buckets[1] & buckets[2])
    
    def test_super_admin_groups_cover_flat_pending_list(self, super_admin):
        requests = mixed_snapshot()
        
        result = categorize_requests(requests, super_admin)
        
        grouped = {r.request_id for g in result.super_admin.values() for r in g.outgoing}
        assert grouped == set(ids(result.outgoing))
        assert grouped == {r.request_id for r in requests if r.status == RequestStatus.PENDING}
    
    def test_every_bucket_is_sorted(self, super_admin, orange_admin):
        requests = mixed_snapshot()
        
        for identity in (super_admin, orange_admin):
            result = categorize_requests(requests, identity)
            buckets = [result.outgoing, result.incoming, result.validated_incoming]
            buckets += [g.outgoing for g in result.super_admin.values()]
            buckets += [g.validated for g in result.super_admin.values()]
            for bucket in buckets:
                keys = [r.submission_sort_key for r in bucket]
                assert keys == sorted(keys, reverse=True)
