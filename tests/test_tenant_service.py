"""Tests for tenant admin operations and direct match lookups."""

from datetime import UTC, datetime

import pytest
from conftest import WEBHOOK, epoch, make_match

from wicketarr.core.exceptions import (
    InvalidTenantSetting,
    PublishError,
    ScorecardUnavailable,
    UpstreamError,
)
from wicketarr.core.types import Scorecard, TenantMode
from wicketarr.publishers.embeds import PING_TEST_DISABLED
from wicketarr.services import MatchService, TenantService, describe_match


@pytest.fixture
def service(store):
    return TenantService(store)


@pytest.fixture
def pinger(store, publisher):
    return TenantService(store, publisher)


@pytest.fixture
def matches(source, store):
    return MatchService(source, store)


# =============================================================================
# TENANT SERVICE
# =============================================================================


class TestChannelAndMode:
    def test_get_or_create_persists_defaults(self, service, store):
        cfg = service.get_or_create("guild")
        assert cfg.mode == TenantMode.DAILY
        assert store.get("guild") is not None

    def test_setup(self, service):
        cfg = service.setup("guild", f"  {WEBHOOK} ", "custom")
        assert cfg.channel_target == WEBHOOK
        assert cfg.mode == TenantMode.CUSTOM

    def test_empty_channel_rejected(self, service):
        with pytest.raises(InvalidTenantSetting):
            service.set_channel("guild", "   ")

    def test_unknown_mode_rejected(self, service, store):
        with pytest.raises(InvalidTenantSetting):
            service.set_mode("guild", "hourly")
        assert store.get("guild") is None


class TestFilters:
    def test_set_categories_normalizes_and_dedupes(self, service):
        cfg = service.set_categories("guild", ["Franchise", "franchise", " first-class "])
        assert cfg.category_filters == ["franchise", "first-class"]

    @pytest.mark.parametrize("categories", [[], ["club"]])
    def test_invalid_categories_rejected(self, service, categories):
        with pytest.raises(InvalidTenantSetting):
            service.set_categories("guild", categories)

    def test_set_gender(self, service):
        assert service.set_gender("guild", "women").gender_filters == ["women"]
        assert service.set_gender("guild", "BOTH").gender_filters == ["men", "women"]
        with pytest.raises(InvalidTenantSetting):
            service.set_gender("guild", "mixed")

    def test_team_filters_dedupe_case_insensitively(self, service):
        service.add_team_filter("guild", "India")
        cfg = service.add_team_filter("guild", "india")
        assert cfg.team_filters == ["India"]

        cfg = service.add_team_filter("guild", "Sri Lanka")
        assert cfg.team_filters == ["India", "Sri Lanka"]

        cfg = service.remove_team_filter("guild", "INDIA")
        assert cfg.team_filters == ["Sri Lanka"]

        assert service.clear_team_filters("guild").team_filters == []

    def test_blank_team_rejected(self, service):
        with pytest.raises(InvalidTenantSetting):
            service.add_team_filter("guild", "  ")

    def test_reset_filters(self, service):
        service.set_categories("guild", ["franchise"])
        service.set_gender("guild", "women")
        service.add_team_filter("guild", "India")

        cfg = service.reset_filters("guild")

        assert cfg.category_filters == ["international", "domestic"]
        assert cfg.gender_filters == ["men", "women"]
        assert cfg.team_filters == []


class TestDailyTimeAndPings:
    def test_set_daily_time_clears_daily_next_due(self, service, store):
        store.upsert(
            "guild", next_due_daily_summary=100, next_due_daily_fallback=200, next_due_custom=300
        )

        cfg = service.set_daily_time("guild", "0930")

        assert cfg.daily_time == "0930"
        assert cfg.next_due_daily_summary is None
        assert cfg.next_due_daily_fallback is None
        assert cfg.next_due_custom == 300

    @pytest.mark.parametrize("value", ["2400", "930", "9:30", "ab12", ""])
    def test_invalid_daily_time_rejected(self, service, store, value):
        store.upsert("guild", next_due_daily_summary=100)
        with pytest.raises(InvalidTenantSetting):
            service.set_daily_time("guild", value)
        assert store.get("guild").next_due_daily_summary == 100

    def test_ping_roles(self, service):
        service.add_ping_role("guild", "111")
        cfg = service.add_ping_role("guild", "111")
        assert cfg.ping_role_ids == ["111"]

        cfg = service.add_ping_role("guild", "222")
        assert cfg.ping_role_ids == ["111", "222"]

        assert service.remove_ping_role("guild", "111").ping_role_ids == ["222"]
        assert service.set_ping_enabled("guild", True).ping_enabled

    def test_non_numeric_role_rejected(self, service):
        with pytest.raises(InvalidTenantSetting):
            service.add_ping_role("guild", "<@&123>")


class TestUpdateSettings:
    def test_applies_all_fields_in_one_write(self, service, store):
        store.upsert("guild", next_due_daily_summary=100)

        cfg = service.update_settings(
            "guild",
            channel_target=WEBHOOK,
            mode="custom",
            categories=["franchise"],
            gender="women",
            daily_time="0930",
            ping_enabled=True,
        )

        assert cfg.channel_target == WEBHOOK
        assert cfg.mode == TenantMode.CUSTOM
        assert cfg.category_filters == ["franchise"]
        assert cfg.gender_filters == ["women"]
        assert cfg.daily_time == "0930"
        assert cfg.next_due_daily_summary is None
        assert cfg.ping_enabled

    def test_invalid_field_leaves_tenant_untouched(self, service, store):
        before = service.set_channel("guild", WEBHOOK)

        with pytest.raises(InvalidTenantSetting):
            service.update_settings(
                "guild", mode="custom", categories=["franchise"], daily_time="9999"
            )

        after = store.get("guild")
        assert after.category_filters == before.category_filters
        assert after.mode == TenantMode.DAILY
        assert after.daily_time == before.daily_time

    def test_no_fields_returns_current_config(self, service, store):
        cfg = service.update_settings("guild")
        assert cfg.mode == TenantMode.DAILY
        assert store.get("guild") is not None


class _RaisingPublisher:
    def post(self, post):
        raise PublishError("webhook gone")


class TestPingTest:
    def test_mentions_configured_roles(self, pinger, publisher):
        pinger.set_channel("guild", WEBHOOK)
        pinger.add_ping_role("guild", "111")
        pinger.set_ping_enabled("guild", True)

        assert pinger.send_ping_test("guild")

        (post,) = publisher.posts
        assert post.channel_target == WEBHOOK
        assert post.content == "<@&111>"
        assert post.mentions.role_ids == ("111",)

    @pytest.mark.parametrize("enabled, roles", [(False, ["111"]), (True, [])])
    def test_disabled_or_no_roles_sends_notice(self, pinger, store, publisher, enabled, roles):
        store.upsert("guild", channel_target=WEBHOOK, ping_enabled=enabled, ping_role_ids=roles)

        assert pinger.send_ping_test("guild")

        (post,) = publisher.posts
        assert post.content == PING_TEST_DISABLED
        assert not post.mentions.pings

    def test_no_channel_rejected(self, pinger, publisher):
        with pytest.raises(InvalidTenantSetting):
            pinger.send_ping_test("guild")
        assert publisher.posts == []

    def test_no_publisher_rejected(self, service):
        service.set_channel("guild", WEBHOOK)
        with pytest.raises(InvalidTenantSetting):
            service.send_ping_test("guild")

    def test_delivery_failure_reports_false(self, pinger, publisher, store):
        pinger.set_channel("guild", WEBHOOK)
        publisher.fail = True
        assert not pinger.send_ping_test("guild")

        raising = TenantService(store, _RaisingPublisher())
        assert not raising.send_ping_test("guild")


class TestSelectionAndPause:
    def test_select_match_switches_to_custom(self, service, store):
        store.upsert("guild", next_due_custom=999)

        cfg = service.select_match("guild", "m1")
        cfg = service.select_match("guild", "m1")

        assert cfg.selected_match_ids == ["m1"]
        assert cfg.mode == TenantMode.CUSTOM
        assert cfg.next_due_custom is None

    def test_unselect_match(self, service):
        service.select_match("guild", "m1")
        service.select_match("guild", "m2")

        cfg = service.unselect_match("guild", "m1")

        assert cfg.selected_match_ids == ["m2"]
        assert cfg.mode == TenantMode.CUSTOM

    def test_unselect_unknown_is_noop(self, service):
        assert service.unselect_match("guild", "nope").selected_match_ids == []

    def test_pause_and_resume(self, service):
        service.set_channel("guild", WEBHOOK)
        assert not service.pause("guild").is_enabled
        assert service.resume("guild").is_enabled


# =============================================================================
# MATCH SERVICE
# =============================================================================


class TestMatchService:
    def test_current_matches_filtered_for_tenant(self, matches, source, service):
        service.set_gender("guild", "women")
        source.current = [
            make_match("men"),
            make_match("women", teams=("India Women", "England Women")),
        ]
        assert [m.id for m in matches.list_current_for_tenant("guild")] == ["women"]

    def test_current_matches_upstream_failure_raises(self, matches, source):
        source.current_errors = [UpstreamError("down")]
        with pytest.raises(UpstreamError):
            matches.list_current_for_tenant("guild")

    def test_scorecard(self, matches, source):
        source.scorecards["m1"] = Scorecard(match_id="m1", name="India vs Australia")
        assert matches.scorecard("m1").name == "India vs Australia"

    def test_scorecard_failure_is_unavailable(self, matches):
        with pytest.raises(ScorecardUnavailable) as exc_info:
            matches.scorecard("m404")
        assert exc_info.value.match_id == "m404"

    def test_tomorrow_fixtures_sorted_internationals_only(self, matches, source):
        tomorrow = datetime(2025, 1, 15, tzinfo=UTC).date()
        source.by_date[tomorrow] = [
            make_match("late", start_time=datetime(2025, 1, 15, 14, 0, tzinfo=UTC)),
            make_match("tba"),
            make_match(
                "ipl",
                teams=("Kolkata Knight Riders", "Chennai Super Kings"),
                series="Indian Premier League 2025",
                match_type="t20",
            ),
            make_match("early", start_time=datetime(2025, 1, 15, 4, 0, tzinfo=UTC)),
        ]

        fixtures = matches.tomorrow_fixtures_for_tenant("guild", now=epoch(2025, 1, 14, 20))

        assert [m.id for m in fixtures] == ["early", "late", "tba"]
        assert source.date_calls == [tomorrow]


class TestSelectionCandidates:
    @pytest.fixture
    def today_matches(self, source):
        today = datetime(2025, 1, 14, tzinfo=UTC).date()
        source.by_date[today] = [
            make_match("sched", start_time=datetime(2025, 1, 14, 14, 0, tzinfo=UTC)),
            make_match(
                "ipl",
                teams=("Kolkata Knight Riders", "Chennai Super Kings"),
                series="Indian Premier League 2025",
                match_type="t20",
                start_time=datetime(2025, 1, 14, 14, 0, tzinfo=UTC),
            ),
            make_match(
                "women",
                teams=("India Women", "Australia Women"),
                start_time=datetime(2025, 1, 14, 9, 0, tzinfo=UTC),
            ),
        ]
        source.current = [
            make_match("live", teams=("England", "South Africa"), status="Live"),
            make_match(
                "old",
                start_time=datetime(2025, 1, 13, 9, 0, tzinfo=UTC),
                status="India won by 5 runs",
            ),
        ]
        return today

    def test_category_today_or_live(self, matches, today_matches):
        found = matches.selection_candidates("guild", "international", now=epoch(2025, 1, 14, 20))
        assert [m.id for m in found] == ["sched", "women", "live"]

    def test_current_data_wins_on_same_id(self, matches, source, today_matches):
        source.current.append(make_match("sched", status="Live"))
        found = matches.selection_candidates("guild", "international", now=epoch(2025, 1, 14, 20))
        assert [m.status for m in found if m.id == "sched"] == ["Live"]

    def test_gender_choice_overrides_tenant_filters(self, matches, service, today_matches):
        service.set_gender("guild", "women")
        found = matches.selection_candidates(
            "guild", "international", gender="men", now=epoch(2025, 1, 14, 20)
        )
        assert [m.id for m in found] == ["sched", "live"]

    def test_team_searched_alongside_tenant_teams(self, matches, service, today_matches):
        found = matches.selection_candidates(
            "guild", "international", team="South Africa", now=epoch(2025, 1, 14, 20)
        )
        assert [m.id for m in found] == ["live"]

        service.add_team_filter("guild", "India")
        found = matches.selection_candidates(
            "guild", "international", team="South Africa", now=epoch(2025, 1, 14, 20)
        )
        assert [m.id for m in found] == ["sched", "women", "live"]

    def test_other_category(self, matches, today_matches):
        found = matches.selection_candidates("guild", "franchise", now=epoch(2025, 1, 14, 20))
        assert [m.id for m in found] == ["ipl"]

    @pytest.mark.parametrize("category, gender", [("t10", None), ("international", "mixed")])
    def test_unknown_choices_rejected(self, matches, category, gender):
        with pytest.raises(InvalidTenantSetting):
            matches.selection_candidates("guild", category, gender=gender)

    def test_upstream_failure_raises(self, matches, source):
        source.date_errors = [UpstreamError("down")]
        with pytest.raises(UpstreamError):
            matches.selection_candidates("guild", "international")


class TestDescribeMatch:
    def test_includes_derived_fields(self):
        match = make_match(
            "m1", status="Live", start_time=datetime(2025, 1, 14, 13, 30, tzinfo=UTC)
        )
        described = describe_match(match)

        assert described["category"] == "international"
        assert described["gender"] == "men"
        assert described["live"]
        assert described["start_time"] == "2025-01-14T13:30:00+00:00"
        assert described["teams"] == ["India", "Australia"]
