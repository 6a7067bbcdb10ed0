"""Tenant filter evaluation.

Combines a tenant's category/gender/team filters with the classifier to
decide whether a match is relevant to that tenant.

Team filters are case-insensitive substring matches against all
participant names and short names, so "India" also matches "India A" and
"India Women". That over-match is accepted behaviour, not a bug.
"""

from dataclasses import dataclass, field

from wicketarr.consumers.classifier import (
    classify_category,
    classify_gender,
    is_regional_domestic,
    normalize_text,
    team_names_text,
)
from wicketarr.core.types import Match, TenantConfig
from wicketarr.utilities.constants import (
    ALL_CATEGORIES,
    ALL_GENDERS,
    CATEGORY_DOMESTIC,
    CATEGORY_FIRST_CLASS,
    CATEGORY_INTERNATIONAL,
)


@dataclass(frozen=True)
class TenantFilters:
    """The three filter collections of a tenant.

    Empty category or gender sets are read as "all known values". Persisted
    tenants always carry non-empty sets, so this only guards against
    corrupted records.
    """

    categories: frozenset[str] = field(default_factory=lambda: frozenset(ALL_CATEGORIES))
    genders: frozenset[str] = field(default_factory=lambda: frozenset(ALL_GENDERS))
    teams: tuple[str, ...] = ()

    @classmethod
    def from_config(cls, config: TenantConfig) -> "TenantFilters":
        return cls(
            categories=frozenset(config.category_filters or ALL_CATEGORIES),
            genders=frozenset(config.gender_filters or ALL_GENDERS),
            teams=tuple(t for t in (config.team_filters or []) if normalize_text(t)),
        )


def category_allowed(match: Match, categories: frozenset[str] | set[str] | None) -> bool:
    return classify_category(match) in (categories or ALL_CATEGORIES)


def gender_allowed(match: Match, genders: frozenset[str] | set[str] | None) -> bool:
    return classify_gender(match) in (genders or ALL_GENDERS)


def team_allowed(match: Match, teams: tuple[str, ...] | list[str] | None) -> bool:
    """No team filters means no restriction."""
    tokens = [normalize_text(t) for t in (teams or ())]
    tokens = [t for t in tokens if t]
    if not tokens:
        return True
    names = team_names_text(match)
    return any(token in names for token in tokens)


def is_relevant(match: Match, filters: TenantFilters) -> bool:
    """Category AND gender AND team filters all pass."""
    return (
        category_allowed(match, filters.categories)
        and gender_allowed(match, filters.genders)
        and team_allowed(match, filters.teams)
    )


def is_fallback_relevant(match: Match, filters: TenantFilters) -> bool:
    """Relevance for the custom-mode fallback summary.

    Ignores the tenant's category filters on purpose: only international
    matches, or domestic/first-class matches of the Indian domestic
    structure, are summarised. Gender and team filters still apply.
    """
    category = classify_category(match)
    if category == CATEGORY_INTERNATIONAL:
        eligible = True
    elif category in (CATEGORY_DOMESTIC, CATEGORY_FIRST_CLASS):
        eligible = is_regional_domestic(match)
    else:
        eligible = False
    return (
        eligible
        and gender_allowed(match, filters.genders)
        and team_allowed(match, filters.teams)
    )


def is_tomorrow_relevant(match: Match, filters: TenantFilters) -> bool:
    """Tomorrow's fixtures listing: internationals only, gender/team filtered."""
    return (
        classify_category(match) == CATEGORY_INTERNATIONAL
        and gender_allowed(match, filters.genders)
        and team_allowed(match, filters.teams)
    )
