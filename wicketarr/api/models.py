"""Pydantic models for API requests and responses."""

from pydantic import BaseModel, ConfigDict

from wicketarr.core.types import TenantMode

# =============================================================================
# Tenants
# =============================================================================


class TenantResponse(BaseModel):
    """Response body for a tenant."""

    model_config = ConfigDict(from_attributes=True)

    tenant_id: str
    channel_target: str | None
    mode: TenantMode
    category_filters: list[str]
    gender_filters: list[str]
    team_filters: list[str]
    selected_match_ids: list[str]
    daily_time: str
    ping_enabled: bool
    ping_role_ids: list[str]
    is_paused: bool
    next_due_custom: int | None = None
    next_due_daily_fallback: int | None = None
    next_due_daily_summary: int | None = None


class TenantUpdate(BaseModel):
    """Request body for updating tenant settings. Omitted fields are left alone."""

    channel_target: str | None = None
    mode: TenantMode | None = None
    categories: list[str] | None = None
    gender: str | None = None  # men, women or both
    daily_time: str | None = None  # HHMM
    ping_enabled: bool | None = None


class TeamFilterRequest(BaseModel):
    team: str


class MatchSelectRequest(BaseModel):
    match_id: str


class PingRoleRequest(BaseModel):
    role_id: str


# =============================================================================
# Matches
# =============================================================================


class MatchSummary(BaseModel):
    """A match with its derived classification."""

    id: str
    name: str
    series: str
    venue: str
    status: str
    match_type: str
    start_time: str | None
    category: str
    gender: str
    live: bool
    teams: list[str]
