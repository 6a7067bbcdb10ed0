"""Direct match lookups.

User-initiated requests. Unlike the scheduler, upstream failures here
are surfaced: a failed scorecard lookup raises ScorecardUnavailable so the
caller can show a "try again later" response.
"""

import logging

from wicketarr.consumers.classifier import (
    classify_category,
    classify_gender,
    is_live,
    is_scheduled_today_or_live,
)
from wicketarr.consumers.filters import (
    TenantFilters,
    gender_allowed,
    is_relevant,
    is_tomorrow_relevant,
    team_allowed,
)
from wicketarr.core.exceptions import InvalidTenantSetting, ScorecardUnavailable, UpstreamError
from wicketarr.core.interfaces import MatchSource, TenantStateStore
from wicketarr.core.types import Match, Scorecard
from wicketarr.services.tenant_service import GENDER_CHOICES
from wicketarr.utilities.constants import ALL_CATEGORIES
from wicketarr.utilities.tz import utc_today, utc_tomorrow

logger = logging.getLogger(__name__)


class MatchService:
    """Current matches, scorecards and tomorrow's fixtures for a tenant."""

    def __init__(self, source: MatchSource, store: TenantStateStore):
        self._source = source
        self._store = store

    def _filters(self, tenant_id: str) -> TenantFilters:
        return TenantFilters.from_config(self._store.ensure(tenant_id))

    def list_current_for_tenant(self, tenant_id: str) -> list[Match]:
        """Current matches passing the tenant's filters.

        Raises:
            UpstreamError: if the current matches could not be fetched
        """
        filters = self._filters(tenant_id)
        return [m for m in self._source.fetch_current_matches() if is_relevant(m, filters)]

    def scorecard(self, match_id: str) -> Scorecard:
        """Detailed scorecard for one match.

        Raises:
            ScorecardUnavailable: on any upstream failure
        """
        try:
            return self._source.fetch_scorecard(match_id)
        except UpstreamError as e:
            logger.warning("[SCORECARD] Lookup for %s failed: %s", match_id, e)
            raise ScorecardUnavailable(match_id, str(e)) from e

    def tomorrow_fixtures_for_tenant(self, tenant_id: str, now: float | None = None) -> list[Match]:
        """Tomorrow's (UTC) international fixtures passing gender/team filters.

        Raises:
            UpstreamError: if the fixtures could not be fetched
        """
        filters = self._filters(tenant_id)
        fixtures = [
            m
            for m in self._source.fetch_matches_on_date(utc_tomorrow(now))
            if is_tomorrow_relevant(m, filters)
        ]
        fixtures.sort(key=lambda m: m.start_time.timestamp() if m.start_time else float("inf"))
        return fixtures

    def selection_candidates(
        self,
        tenant_id: str,
        category: str,
        gender: str | None = None,
        team: str | None = None,
        now: float | None = None,
    ) -> list[Match]:
        """Matches a tenant can pick to live-track.

        Today's scheduled and current matches (current wins on the same id)
        of exactly the given category that are scheduled today or live.
        gender (men, women or both) replaces the tenant's gender filters for
        this search; team is searched in addition to the tenant's team
        filters.

        Raises:
            InvalidTenantSetting: for an unknown category or gender choice
            UpstreamError: if either match list could not be fetched
        """
        category = (category or "").strip().lower()
        if category not in ALL_CATEGORIES:
            raise InvalidTenantSetting(f"Unknown category: {category!r}")

        filters = self._filters(tenant_id)
        genders = filters.genders
        if gender:
            choice = GENDER_CHOICES.get(gender.strip().lower())
            if choice is None:
                raise InvalidTenantSetting(f"Gender must be one of {sorted(GENDER_CHOICES)}")
            genders = frozenset(choice)
        teams = filters.teams
        if team and team.strip():
            teams = (*teams, team.strip())

        today = utc_today(now)
        merged: dict[str, Match] = {}
        for match in self._source.fetch_matches_on_date(today):
            merged[match.id] = match
        for match in self._source.fetch_current_matches():
            merged[match.id] = match

        return [
            m
            for m in merged.values()
            if classify_category(m) == category
            and is_scheduled_today_or_live(m, today)
            and gender_allowed(m, genders)
            and team_allowed(m, teams)
        ]


def describe_match(match: Match) -> dict:
    """Summary dict of a match with its derived classification."""
    return {
        "id": match.id,
        "name": match.name,
        "series": match.series,
        "venue": match.venue,
        "status": match.status,
        "match_type": match.match_type,
        "start_time": match.start_time.isoformat() if match.start_time else None,
        "category": classify_category(match),
        "gender": classify_gender(match),
        "live": is_live(match),
        "teams": [t.name for t in match.teams],
    }
