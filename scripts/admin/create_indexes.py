"""
MongoDB bootstrap script
Creates indexes, the default permission catalogue and the bootstrap admin
"""
import sys

from pymongo.errors import PyMongoError

from app.repositories.indexes import ensure_indexes
from app.services.auth import ensure_admin_user
from app.services.permissions import PermissionService

print("=" * 60)
print("Bootstrapping storefront database")
print("=" * 60)

print("\n[1/3] indexes...")
try:
    ensure_indexes()
    print("  ✓ indexes created")
except PyMongoError as e:
    print(f"  ✗ Error: {e}")
    sys.exit(1)

print("\n[2/3] permissions...")
created = PermissionService().initialize_default_permissions()
print(f"  ✓ {created} new permissions")

print("\n[3/3] admin user...")
admin = ensure_admin_user()
if admin:
    print(f"  ✓ {admin['email']}")
else:
    print("  - STOREFRONT_ADMIN_EMAIL / STOREFRONT_ADMIN_PASSWORD not set, skipped")
