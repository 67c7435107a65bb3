"""Check current admin role assignments"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from mnp_admin.config.settings import get_settings
from mnp_admin.domain.enums import AdminRole
from mnp_admin.repositories.mongo_client import MongoContext
from mnp_admin.repositories.admin_role_repo import AdminRoleRepository, parse_role_document

mongo = MongoContext(get_settings())
roles = AdminRoleRepository(mongo.get_collection(mongo.settings.admin_roles_collection))

print("=== Current Admin Roles ===")
docs = roles.list_roles()
if docs:
    for doc in docs:
        identity = parse_role_document(doc)
        print(f"  - {doc['_id']}")
        print(f"    Stored role: {doc.get('role', 'N/A')}")
        if identity is None:
            print("    Resolved: UNRECOGNIZED (sign-in will be refused)")
        else:
            scope = identity.operator.value if identity.operator else "all operators"
            print(f"    Resolved: {identity.role.value} ({scope})")
else:
    print("  No admin roles configured.")
    print("  Run: python -m scripts.seed_data")

print()
print("=== Setup Status ===")
identities = [parse_role_document(d) for d in docs]
has_super_admin = any(i is not None and i.role == AdminRole.SUPER_ADMIN for i in identities)
print(f"  Super Admin Exists: {has_super_admin}")

mongo.close()
