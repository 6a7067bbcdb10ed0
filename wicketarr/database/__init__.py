"""Database layer."""

from wicketarr.database.connection import get_connection, get_db, init_db, reset_db
from wicketarr.database.tenants import (
    SqliteTenantStore,
    get_tenant,
    insert_tenant_if_missing,
    list_tenants,
    update_tenant_fields,
)

__all__ = [
    # Connection
    "get_connection",
    "get_db",
    "init_db",
    "reset_db",
    # Tenants
    "SqliteTenantStore",
    "get_tenant",
    "insert_tenant_if_missing",
    "list_tenants",
    "update_tenant_fields",
]
