"""
Seed Data Script - Creates sample portability requests and admin roles
Run: python -m scripts.seed_data
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from datetime import datetime, timezone

from mnp_admin.config.settings import get_settings
from mnp_admin.domain.enums import Operator, RequestStatus
from mnp_admin.domain.models import AdminIdentity
from mnp_admin.repositories.mongo_client import MongoContext
from mnp_admin.repositories.request_repo import RequestRepository, build_document_path
from mnp_admin.repositories.admin_role_repo import AdminRoleRepository
from mnp_admin.utils.idgen import generate_request_id


SAMPLE_REQUESTS = [
    # (fullNumber, source, target, status, submittedAt)
    ("+243810000001", "ORANGE", "AIRTEL", RequestStatus.PENDING, datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)),
    ("+243990000002", "AIRTEL", "ORANGE", RequestStatus.PENDING, datetime(2024, 3, 2, 10, 30, tzinfo=timezone.utc)),
    ("+243820000003", "VODACOM", "ORANGE", RequestStatus.VALIDATED, datetime(2023, 11, 15, 14, 0, tzinfo=timezone.utc)),
    ("+243900000004", "AFRICELL", "VODACOM", RequestStatus.REJECTED, datetime(2023, 6, 20, 8, 45, tzinfo=timezone.utc)),
    ("+243840000005", "ORANGE", "AFRICELL", RequestStatus.VALIDATED, datetime(2024, 1, 5, 16, 15, tzinfo=timezone.utc)),
]

SAMPLE_ADMINS = {
    "super-admin-uid": AdminIdentity.super_admin(),
    "orange-admin-uid": AdminIdentity.provider_admin(Operator.ORANGE),
    "airtel-admin-uid": AdminIdentity.provider_admin(Operator.AIRTEL),
}


def create_sample_requests(mongo: MongoContext) -> None:
    settings = mongo.settings
    repo = RequestRepository(mongo.get_collection(settings.requests_collection))
    
    # Check if already seeded
    if repo.count() > 0:
        print("Database already has requests. Skipping seed.")
        return
    
    for full_number, source, target, status, submitted_at in SAMPLE_REQUESTS:
        request_id = generate_request_id()
        path = build_document_path(settings.app_id, full_number, request_id)
        repo.insert_document(path, {
            "id": request_id,
            "fullNumber": full_number,
            "sourceProvider": source,
            "targetProvider": target,
            "status": status.value,
            "submittedAt": submitted_at,
            "firstName": "Sample",
            "email": f"user{full_number[-4:]}@example.com",
            "firebaseUid": f"uid-{full_number[-4:]}",
        })
        print(f"Created request: {path}")


def create_sample_admins(mongo: MongoContext) -> None:
    roles = AdminRoleRepository(mongo.get_collection(mongo.settings.admin_roles_collection))
    for principal_id, identity in SAMPLE_ADMINS.items():
        roles.set_identity(principal_id, identity)
        print(f"Granted {identity.role.value} to {principal_id}")


def main():
    print("=== Seeding database ===")
    print("-" * 40)
    
    mongo = MongoContext(get_settings())
    try:
        mongo.ping()
        mongo.create_indexes()
        create_sample_requests(mongo)
        create_sample_admins(mongo)
    finally:
        mongo.close()
    
    print("-" * 40)
    print("Done!")


if __name__ == "__main__":
    main()
