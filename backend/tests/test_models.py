"""Tests for domain models"""
from datetime import datetime, timezone

import pytest

from mnp_admin.domain.enums import AdminRole, Operator, RequestStatus
from mnp_admin.domain.errors import InvalidIdentityError
from mnp_admin.domain.models import AdminIdentity, PortabilityRequest


def document(**overrides):
    doc = {
        "_id": "artifacts/app/users/+243810000001/portability_requests/req-1",
        "id": "req-1",
        "fullNumber": "+243810000001",
        "sourceProvider": "ORANGE",
        "targetProvider": "AIRTEL",
        "status": "PENDING",
        "submittedAt": datetime(2024, 3, 1, tzinfo=timezone.utc),
        "email": "jane@example.com",
        "firstName": "Jane",
        "firebaseUid": "uid-1",
    }
    doc.update(overrides)
    return doc


class TestFromDocument:
    
    def test_maps_stored_fields(self):
        request = PortabilityRequest.from_document(document())
        
        assert request.request_id == "req-1"
        assert request.full_number == "+243810000001"
        assert request.source_provider == Operator.ORANGE
        assert request.target_provider == Operator.AIRTEL
        assert request.status == RequestStatus.PENDING
        assert request.submitted_year == 2024
        assert request.first_name == "Jane"
        assert request.owner_uid == "uid-1"
        assert request.path.endswith("/portability_requests/req-1")
    
    def test_missing_display_fields_use_placeholder(self):
        request = PortabilityRequest.from_document(document(email=None, firstName=""))
        
        assert request.email == "N/A"
        assert request.first_name == "N/A"
    
    def test_non_string_fields_are_defaulted(self):
        request = PortabilityRequest.from_document(
            document(firstName=12345, email=["jane@example.com"], firebaseUid=99, path=7)
        )
        
        assert request is not None
        assert request.first_name == "N/A"
        assert request.email == "N/A"
        assert request.owner_uid is None
        assert request.path == "artifacts/app/users/+243810000001/portability_requests/req-1"
    
    def test_malformed_timestamp_resolves_to_none(self):
        request = PortabilityRequest.from_document(document(submittedAt="garbage"))
        
        assert request is not None
        assert request.submitted_at is None
        assert request.submitted_millis == 0
        assert request.submitted_year is None
    
    def test_id_falls_back_to_path_segment(self):
        doc = document()
        del doc["id"]
        
        assert PortabilityRequest.from_document(doc).request_id == "req-1"
    
    @pytest.mark.parametrize("overrides", [
        {"status": "ARCHIVED"},
        {"sourceProvider": "MTN"},
        {"targetProvider": None},
        {"fullNumber": None},
    ])
    def test_unusable_documents(self, overrides):
        assert PortabilityRequest.from_document(document(**overrides)) is None


class TestAdminIdentity:
    
    def test_provider_admin_requires_operator(self):
        with pytest.raises(InvalidIdentityError):
            AdminIdentity(role=AdminRole.PROVIDER_ADMIN)
    
    def test_operator_is_dropped_for_other_roles(self):
        identity = AdminIdentity(role=AdminRole.SUPER_ADMIN, operator=Operator.ORANGE)
        
        assert identity.operator is None
    
    def test_tracked_operators(self):
        assert AdminIdentity.guest().tracked_operators == []
        assert AdminIdentity.provider_admin(Operator.VODACOM).tracked_operators == [Operator.VODACOM]
        assert len(AdminIdentity.super_admin().tracked_operators) == 4
