"""Tests for tenant filter evaluation."""

from conftest import make_match

from wicketarr.consumers.filters import (
    TenantFilters,
    is_fallback_relevant,
    is_relevant,
    is_tomorrow_relevant,
    team_allowed,
)
from wicketarr.core.types import TenantConfig

INTERNATIONAL = make_match("intl")
RANJI = make_match(
    "ranji", teams=("Mumbai", "Delhi"), series="Ranji Trophy 2025-26", match_type="test"
)
SHIELD = make_match(
    "shield", teams=("Victoria", "Queensland"), series="Sheffield Shield", match_type="test"
)
IPL = make_match(
    "ipl",
    teams=("Kolkata Knight Riders", "Chennai Super Kings"),
    series="Indian Premier League 2025",
    match_type="t20",
)
WOMEN_INTL = make_match(
    "w-intl", teams=("India Women", "England Women"), series="England Women tour of India"
)


class TestTenantFilters:
    def test_from_default_config(self):
        filters = TenantFilters.from_config(TenantConfig(tenant_id="t"))
        assert filters.categories == {"international", "domestic"}
        assert filters.genders == {"men", "women"}
        assert filters.teams == ()

    def test_empty_sets_mean_all(self):
        cfg = TenantConfig(tenant_id="t", category_filters=[], gender_filters=[])
        filters = TenantFilters.from_config(cfg)
        assert is_relevant(IPL, filters)
        assert is_relevant(SHIELD, filters)

    def test_blank_team_filters_are_dropped(self):
        cfg = TenantConfig(tenant_id="t", team_filters=["  ", "India"])
        assert TenantFilters.from_config(cfg).teams == ("India",)


class TestIsRelevant:
    def test_defaults_exclude_first_class_and_franchise(self):
        filters = TenantFilters.from_config(TenantConfig(tenant_id="t"))
        assert is_relevant(INTERNATIONAL, filters)
        assert not is_relevant(RANJI, filters)
        assert not is_relevant(IPL, filters)

    def test_gender_filter(self):
        filters = TenantFilters(genders=frozenset({"men"}))
        assert is_relevant(INTERNATIONAL, filters)
        assert not is_relevant(WOMEN_INTL, filters)

    def test_team_filter(self):
        filters = TenantFilters(teams=("australia",))
        assert is_relevant(INTERNATIONAL, filters)
        assert not is_relevant(WOMEN_INTL, filters)


class TestTeamAllowed:
    def test_no_filters_allows_everything(self):
        assert team_allowed(INTERNATIONAL, ())

    def test_case_insensitive_substring(self):
        assert team_allowed(INTERNATIONAL, ("INDIA",))

    def test_substring_over_match_is_accepted(self):
        # "India" also matches "India Women"
        assert team_allowed(WOMEN_INTL, ("India",))

    def test_short_names_are_searched(self):
        match = make_match("m", teams=("India", "Australia"), short_names=("IND", "AUS"))
        assert team_allowed(match, ("aus",))


class TestFallbackRelevance:
    """The fallback summary ignores the tenant's category filters on purpose."""

    def test_international_passes_even_when_category_not_selected(self):
        filters = TenantFilters(categories=frozenset({"franchise"}))
        assert is_fallback_relevant(INTERNATIONAL, filters)
        assert not is_relevant(INTERNATIONAL, filters)

    def test_regional_first_class_passes(self):
        filters = TenantFilters.from_config(TenantConfig(tenant_id="t"))
        assert is_fallback_relevant(RANJI, filters)
        assert not is_relevant(RANJI, filters)

    def test_non_regional_first_class_excluded(self):
        filters = TenantFilters(categories=frozenset({"first-class"}))
        assert not is_fallback_relevant(SHIELD, filters)
        assert is_relevant(SHIELD, filters)

    def test_franchise_excluded(self):
        filters = TenantFilters(categories=frozenset({"franchise"}))
        assert not is_fallback_relevant(IPL, filters)

    def test_gender_and_team_still_apply(self):
        assert not is_fallback_relevant(INTERNATIONAL, TenantFilters(genders=frozenset({"women"})))
        assert not is_fallback_relevant(INTERNATIONAL, TenantFilters(teams=("pakistan",)))


class TestTomorrowRelevance:
    def test_internationals_only(self):
        filters = TenantFilters()
        assert is_tomorrow_relevant(INTERNATIONAL, filters)
        assert not is_tomorrow_relevant(RANJI, filters)
        assert not is_tomorrow_relevant(IPL, filters)

    def test_gender_filter(self):
        filters = TenantFilters(genders=frozenset({"women"}))
        assert is_tomorrow_relevant(WOMEN_INTL, filters)
        assert not is_tomorrow_relevant(INTERNATIONAL, filters)
