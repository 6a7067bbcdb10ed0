"""Service layer.

This layer provides clean APIs for admin operations and direct lookups,
hiding the consumer layer implementation details from the API layer.

Layer hierarchy:
    API → Services → Consumers → Providers
"""

from wicketarr.core.interfaces import MatchSource, Publisher, TenantStateStore
from wicketarr.services.match_service import MatchService, describe_match
from wicketarr.services.tenant_service import GENDER_CHOICES, TenantService


def create_tenant_service(
    store: TenantStateStore, publisher: Publisher | None = None
) -> TenantService:
    """Factory for TenantService."""
    return TenantService(store, publisher)


def create_match_service(source: MatchSource, store: TenantStateStore) -> MatchService:
    """Factory for MatchService."""
    return MatchService(source, store)


__all__ = [
    "GENDER_CHOICES",
    "MatchService",
    "TenantService",
    "create_match_service",
    "create_tenant_service",
    "describe_match",
]
