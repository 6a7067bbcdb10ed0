"""Tenant configuration persistence.

One row per tenant in the tenants table. Writes are field-level: only the
columns passed to update_tenant_fields() are touched, so the scheduler's
bookkeeping writes never overwrite an admin change made in between.
"""

import json
import logging
import sqlite3
import threading
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path
from sqlite3 import Connection, Row

from wicketarr.core.exceptions import PersistenceError
from wicketarr.core.types import TenantConfig, TenantMode
from wicketarr.database.connection import get_db
from wicketarr.utilities.constants import (
    ALL_CATEGORIES,
    ALL_GENDERS,
    DEFAULT_CATEGORY_FILTERS,
    DEFAULT_GENDER_FILTERS,
)

logger = logging.getLogger(__name__)

_LIST_COLUMNS = frozenset(
    {"category_filters", "gender_filters", "team_filters", "selected_match_ids", "ping_role_ids"}
)
_BOOL_COLUMNS = frozenset({"ping_enabled", "is_paused"})
_INT_COLUMNS = frozenset({"next_due_custom", "next_due_daily_fallback", "next_due_daily_summary"})
_TEXT_COLUMNS = frozenset({"channel_target", "mode", "daily_time"})

WRITABLE_COLUMNS = _LIST_COLUMNS | _BOOL_COLUMNS | _INT_COLUMNS | _TEXT_COLUMNS


# =============================================================================
# ROW CONVERSION
# =============================================================================


def _load_list(raw: str | None, fallback: tuple[str, ...] = ()) -> list[str]:
    if not raw:
        return list(fallback)
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("[DB] Corrupt list column value %r, using defaults", raw)
        return list(fallback)
    if not isinstance(parsed, list):
        return list(fallback)
    return [str(v) for v in parsed]


def _load_known(raw: str | None, known: tuple[str, ...], default: tuple[str, ...]) -> list[str]:
    """Filter set column; empty or unknown-only values fall back to all known values."""
    values = [v for v in _load_list(raw, default) if v in known]
    return values or list(known)


def _row_to_tenant(row: Row) -> TenantConfig:
    try:
        mode = TenantMode(row["mode"])
    except ValueError:
        mode = TenantMode.DAILY
    return TenantConfig(
        tenant_id=row["tenant_id"],
        channel_target=row["channel_target"],
        mode=mode,
        category_filters=_load_known(
            row["category_filters"], ALL_CATEGORIES, DEFAULT_CATEGORY_FILTERS
        ),
        gender_filters=_load_known(row["gender_filters"], ALL_GENDERS, DEFAULT_GENDER_FILTERS),
        team_filters=_load_list(row["team_filters"]),
        selected_match_ids=_load_list(row["selected_match_ids"]),
        daily_time=row["daily_time"],
        ping_enabled=bool(row["ping_enabled"]),
        ping_role_ids=_load_list(row["ping_role_ids"]),
        is_paused=bool(row["is_paused"]),
        next_due_custom=row["next_due_custom"],
        next_due_daily_fallback=row["next_due_daily_fallback"],
        next_due_daily_summary=row["next_due_daily_summary"],
    )


def _to_column_value(column: str, value):
    if column in _LIST_COLUMNS:
        return json.dumps(list(value or []))
    if column in _BOOL_COLUMNS:
        return int(bool(value))
    if column in _INT_COLUMNS:
        return None if value is None else int(value)
    if column == "mode":
        return TenantMode(value).value
    return value


# =============================================================================
# QUERIES
# =============================================================================


def get_tenant(conn: Connection, tenant_id: str) -> TenantConfig | None:
    """Get one tenant, or None if it has never been created."""
    cursor = conn.execute("SELECT * FROM tenants WHERE tenant_id = ?", (tenant_id,))
    row = cursor.fetchone()
    return _row_to_tenant(row) if row else None


def list_tenants(conn: Connection) -> list[TenantConfig]:
    """All tenants, in creation order."""
    cursor = conn.execute("SELECT * FROM tenants ORDER BY created_at, tenant_id")
    return [_row_to_tenant(row) for row in cursor.fetchall()]


def insert_tenant_if_missing(conn: Connection, config: TenantConfig) -> bool:
    """Insert a tenant with the given defaults unless it already exists.

    Returns:
        True if a row was created
    """
    columns = ["tenant_id", *sorted(WRITABLE_COLUMNS)]
    values = [config.tenant_id] + [
        _to_column_value(c, getattr(config, c)) for c in sorted(WRITABLE_COLUMNS)
    ]
    placeholders = ", ".join("?" for _ in columns)
    cursor = conn.execute(
        f"INSERT OR IGNORE INTO tenants ({', '.join(columns)}) VALUES ({placeholders})",
        values,
    )
    if cursor.rowcount > 0:
        logger.info("[CREATED] Tenant %s", config.tenant_id)
        return True
    return False


def update_tenant_fields(conn: Connection, tenant_id: str, **fields) -> bool:
    """Update only the given columns of one tenant.

    Raises:
        ValueError: for a column that is not writable

    Returns:
        True if updated
    """
    unknown = set(fields) - WRITABLE_COLUMNS
    if unknown:
        raise ValueError(f"Unknown tenant fields: {sorted(unknown)}")
    if not fields:
        return False

    updates = [f"{column} = ?" for column in fields]
    values = [_to_column_value(column, value) for column, value in fields.items()]
    updates.append("updated_at = CURRENT_TIMESTAMP")

    cursor = conn.execute(
        f"UPDATE tenants SET {', '.join(updates)} WHERE tenant_id = ?",
        [*values, tenant_id],
    )
    if cursor.rowcount > 0:
        logger.debug("[UPDATED] Tenant %s: %s", tenant_id, sorted(fields))
        return True
    return False


# =============================================================================
# STORE
# =============================================================================


class SqliteTenantStore:
    """TenantStateStore backed by the tenants table.

    lock(tenant_id) returns a per-tenant re-entrant lock. The scheduler
    holds it while processing a tenant and the service layer holds it for
    read-modify-write admin operations, so the two never interleave on the
    same tenant.
    """

    def __init__(self, db_path: Path | str | None = None, default_daily_time: str = "2100"):
        self._db_path = db_path
        self._default_daily_time = default_daily_time
        self._locks: dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()

    @contextmanager
    def _db(self) -> Generator[Connection, None, None]:
        try:
            with get_db(self._db_path) as conn:
                yield conn
        except sqlite3.Error as e:
            raise PersistenceError(str(e)) from e

    def lock(self, tenant_id: str) -> threading.RLock:
        with self._locks_guard:
            lock = self._locks.get(tenant_id)
            if lock is None:
                lock = threading.RLock()
                self._locks[tenant_id] = lock
            return lock

    def get(self, tenant_id: str) -> TenantConfig | None:
        with self._db() as conn:
            return get_tenant(conn, tenant_id)

    def ensure(self, tenant_id: str, **defaults) -> TenantConfig:
        """Get a tenant, creating and persisting it with defaults first if absent."""
        defaults.setdefault("daily_time", self._default_daily_time)
        with self._db() as conn:
            existing = get_tenant(conn, tenant_id)
            if existing is not None:
                return existing
            insert_tenant_if_missing(conn, TenantConfig(tenant_id=tenant_id, **defaults))
            return get_tenant(conn, tenant_id)

    def upsert(self, tenant_id: str, **fields) -> TenantConfig:
        """Field-level merge; creates the tenant with defaults if needed."""
        with self._db() as conn:
            if get_tenant(conn, tenant_id) is None:
                insert_tenant_if_missing(
                    conn, TenantConfig(tenant_id=tenant_id, daily_time=self._default_daily_time)
                )
            update_tenant_fields(conn, tenant_id, **fields)
            return get_tenant(conn, tenant_id)

    def list_tenants(self) -> list[TenantConfig]:
        with self._db() as conn:
            return list_tenants(conn)
