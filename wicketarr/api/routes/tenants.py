"""Tenant admin API endpoints.

InvalidTenantSetting raised by the service is turned into a 422 by the
application's exception handler.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from wicketarr.api.dependencies import get_tenant_service
from wicketarr.api.models import (
    MatchSelectRequest,
    PingRoleRequest,
    TeamFilterRequest,
    TenantResponse,
    TenantUpdate,
)
from wicketarr.services import TenantService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/tenants", response_model=list[TenantResponse])
def list_tenants(service: TenantService = Depends(get_tenant_service)):
    """List all tenants."""
    return service.list_tenants()


@router.get("/tenants/{tenant_id}", response_model=TenantResponse)
def get_tenant(tenant_id: str, service: TenantService = Depends(get_tenant_service)):
    """Get a tenant, creating it with defaults on first access."""
    return service.get_or_create(tenant_id)


@router.patch("/tenants/{tenant_id}", response_model=TenantResponse)
def update_tenant(
    tenant_id: str,
    update: TenantUpdate,
    service: TenantService = Depends(get_tenant_service),
):
    """Update tenant settings.

    All supplied fields are validated first and written together, so a 422
    leaves the tenant unchanged.
    """
    return service.update_settings(
        tenant_id,
        channel_target=update.channel_target,
        mode=update.mode,
        categories=update.categories,
        gender=update.gender,
        daily_time=update.daily_time,
        ping_enabled=update.ping_enabled,
    )


@router.post("/tenants/{tenant_id}/pause", response_model=TenantResponse)
def pause_tenant(tenant_id: str, service: TenantService = Depends(get_tenant_service)):
    return service.pause(tenant_id)


@router.post("/tenants/{tenant_id}/resume", response_model=TenantResponse)
def resume_tenant(tenant_id: str, service: TenantService = Depends(get_tenant_service)):
    return service.resume(tenant_id)


@router.post("/tenants/{tenant_id}/reset-filters", response_model=TenantResponse)
def reset_filters(tenant_id: str, service: TenantService = Depends(get_tenant_service)):
    """Restore default category/gender filters and clear team filters."""
    return service.reset_filters(tenant_id)


# =============================================================================
# Team filters
# =============================================================================


@router.post("/tenants/{tenant_id}/teams", response_model=TenantResponse)
def add_team_filter(
    tenant_id: str,
    request: TeamFilterRequest,
    service: TenantService = Depends(get_tenant_service),
):
    return service.add_team_filter(tenant_id, request.team)


@router.delete("/tenants/{tenant_id}/teams/{team}", response_model=TenantResponse)
def remove_team_filter(
    tenant_id: str,
    team: str,
    service: TenantService = Depends(get_tenant_service),
):
    return service.remove_team_filter(tenant_id, team)


@router.delete("/tenants/{tenant_id}/teams", response_model=TenantResponse)
def clear_team_filters(tenant_id: str, service: TenantService = Depends(get_tenant_service)):
    return service.clear_team_filters(tenant_id)


# =============================================================================
# Match selection
# =============================================================================


@router.post("/tenants/{tenant_id}/selection", response_model=TenantResponse)
def select_match(
    tenant_id: str,
    request: MatchSelectRequest,
    service: TenantService = Depends(get_tenant_service),
):
    """Start live-tracking a match (switches the tenant to custom mode)."""
    return service.select_match(tenant_id, request.match_id)


@router.delete("/tenants/{tenant_id}/selection/{match_id}", response_model=TenantResponse)
def unselect_match(
    tenant_id: str,
    match_id: str,
    service: TenantService = Depends(get_tenant_service),
):
    return service.unselect_match(tenant_id, match_id)


# =============================================================================
# Ping roles
# =============================================================================


@router.post("/tenants/{tenant_id}/ping-roles", response_model=TenantResponse)
def add_ping_role(
    tenant_id: str,
    request: PingRoleRequest,
    service: TenantService = Depends(get_tenant_service),
):
    return service.add_ping_role(tenant_id, request.role_id)


@router.delete("/tenants/{tenant_id}/ping-roles/{role_id}", response_model=TenantResponse)
def remove_ping_role(
    tenant_id: str,
    role_id: str,
    service: TenantService = Depends(get_tenant_service),
):
    return service.remove_ping_role(tenant_id, role_id)


@router.post("/tenants/{tenant_id}/ping-test")
def ping_test(tenant_id: str, service: TenantService = Depends(get_tenant_service)) -> dict:
    """Send the tenant's role mentions to its channel to check pings work."""
    if not service.send_ping_test(tenant_id):
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Ping test could not be delivered to the channel",
        )
    return {"tenant_id": tenant_id, "sent": True}
