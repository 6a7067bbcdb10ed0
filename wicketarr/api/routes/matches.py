"""Match lookup API endpoints."""

import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException, Query, status

from wicketarr.api.dependencies import get_match_service
from wicketarr.api.models import MatchSummary
from wicketarr.core.exceptions import UpstreamError
from wicketarr.services import MatchService, describe_match

logger = logging.getLogger(__name__)

router = APIRouter()


def _unavailable(e: Exception) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=f"Match data unavailable, try again later ({e})",
    )


@router.get("/matches/current", response_model=list[MatchSummary])
def current_matches(
    tenant_id: str = Query(..., description="Tenant whose filters apply"),
    service: MatchService = Depends(get_match_service),
):
    """Current matches passing the tenant's filters."""
    try:
        matches = service.list_current_for_tenant(tenant_id)
    except UpstreamError as e:
        raise _unavailable(e) from e
    return [describe_match(m) for m in matches]


@router.get("/matches/tomorrow", response_model=list[MatchSummary])
def tomorrow_fixtures(
    tenant_id: str = Query(..., description="Tenant whose filters apply"),
    service: MatchService = Depends(get_match_service),
):
    """Tomorrow's international fixtures passing the tenant's gender/team filters."""
    try:
        matches = service.tomorrow_fixtures_for_tenant(tenant_id)
    except UpstreamError as e:
        raise _unavailable(e) from e
    return [describe_match(m) for m in matches]


@router.get("/matches/{match_id}/scorecard")
def match_scorecard(match_id: str, service: MatchService = Depends(get_match_service)) -> dict:
    """Detailed scorecard. 503 when upstream fails."""
    return asdict(service.scorecard(match_id))


@router.get("/matches/candidates", response_model=list[MatchSummary])
def selection_candidates(
    tenant_id: str = Query(..., description="Tenant whose team filters apply"),
    category: str = Query(..., description="international, first-class, domestic or franchise"),
    gender: str | None = Query(None, description="men, women or both; defaults to the tenant's"),
    team: str | None = Query(None, description="Extra team name to search for"),
    service: MatchService = Depends(get_match_service),
):
    """Today's or live matches of one category that the tenant can pick to track."""
    try:
        matches = service.selection_candidates(tenant_id, category, gender=gender, team=team)
    except UpstreamError as e:
        raise _unavailable(e) from e
    return [describe_match(m) for m in matches]
