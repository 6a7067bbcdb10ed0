"""Tests for the CricAPI client and match source normalization."""

from datetime import UTC, date, datetime

import httpx
import pytest

from wicketarr.core.exceptions import ScorecardUnavailable, UpstreamError
from wicketarr.providers.cricapi import (
    CricAPIClient,
    CricAPIMatchSource,
    parse_match,
    parse_scorecard,
)
from wicketarr.services import MatchService


def _client(handler, **kwargs) -> CricAPIClient:
    kwargs.setdefault("retry_delay", 0)
    return CricAPIClient(
        api_key="secret-key",
        base_url="https://cricapi.example.test/v1",
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


def _page(rows, total, status="success"):
    return {"status": status, "data": rows, "info": {"totalRows": total}}


# =============================================================================
# CLIENT
# =============================================================================


class TestPagination:
    def test_follows_offsets_until_total_rows(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            offset = int(request.url.params["offset"])
            seen.append(offset)
            rows = [{"id": f"m{offset + i}"} for i in range(2) if offset + i < 3]
            return httpx.Response(200, json=_page(rows, 3))

        client = _client(handler, page_size=2)
        rows = client.get_current_matches()

        assert seen == [0, 2]
        assert [r["id"] for r in rows] == ["m0", "m1", "m2"]

    def test_api_key_sent_as_query_param(self):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["params"] = dict(request.url.params)
            captured["path"] = request.url.path
            return httpx.Response(200, json=_page([], 0))

        _client(handler).get_matches()

        assert captured["params"]["apikey"] == "secret-key"
        assert captured["path"] == "/v1/matches"

    def test_stops_on_non_success_and_keeps_earlier_pages(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.params["offset"] == "0":
                return httpx.Response(200, json=_page([{"id": "m0"}], 10))
            return httpx.Response(200, json={"status": "failure", "reason": "hits today exceeded"})

        client = _client(handler, page_size=1)
        rows = client.get_current_matches()

        assert rows == [{"id": "m0"}]
        health = client.health_check()
        assert health["stats"]["non_success_payloads"] == 1
        assert health["stats"]["last_error"] == "hits today exceeded"

    def test_non_dict_rows_are_dropped(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=_page([{"id": "m0"}, "junk", None], 3))

        assert _client(handler, page_size=25).get_current_matches() == [{"id": "m0"}]


class TestRetries:
    def test_http_error_retried_then_raised(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(502)

        client = _client(handler, retry_count=3)
        with pytest.raises(UpstreamError) as exc_info:
            client.get_current_matches()

        assert len(calls) == 3
        assert exc_info.value.status_code == 502
        assert client.health_check()["status"] == "unhealthy"

    def test_transport_error_recovers_on_retry(self):
        attempts = {"n": 0}

        def handler(request: httpx.Request) -> httpx.Response:
            attempts["n"] += 1
            if attempts["n"] == 1:
                raise httpx.ReadTimeout("Read timed out", request=request)
            return httpx.Response(200, json=_page([{"id": "m1"}], 1))

        client = _client(handler, retry_count=2)
        assert client.get_current_matches() == [{"id": "m1"}]
        assert client.health_check()["stats"]["requests_success"] == 1

    def test_invalid_json_is_not_retried(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, content=b"<html>oops</html>")

        with pytest.raises(UpstreamError):
            _client(handler, retry_count=3).get_current_matches()
        assert len(calls) == 1

    def test_health_unknown_before_requests(self):
        client = _client(lambda request: httpx.Response(200, json=_page([], 0)))
        assert client.health_check()["status"] == "unknown"


# =============================================================================
# MATCH PARSING
# =============================================================================


class TestParseMatch:
    def test_full_record(self):
        match = parse_match(
            {
                "id": "abc-123",
                "name": "India vs Australia, 1st T20I",
                "matchType": "t20",
                "status": "India opt to bat",
                "venue": "Wankhede Stadium, Mumbai",
                "dateTimeGMT": "2025-01-14T13:30:00",
                "series": "Australia tour of India, 2025",
                "matchStarted": True,
                "teamInfo": [
                    {"name": "India", "shortname": "IND", "img": "https://img.test/ind.png"},
                    {"name": "Australia", "shortname": "AUS"},
                ],
                "score": [{"r": 182, "w": 6, "o": 20, "inning": "India Inning 1"}],
            }
        )

        assert match.id == "abc-123"
        assert match.start_time == datetime(2025, 1, 14, 13, 30, tzinfo=UTC)
        assert match.started
        assert [t.short_name for t in match.teams] == ["IND", "AUS"]
        assert match.teams[0].image_url == "https://img.test/ind.png"
        assert match.innings[0].label == "India Inning 1"
        assert (match.innings[0].runs, match.innings[0].wickets) == (182, 6)

    def test_teams_fall_back_to_plain_list(self):
        match = parse_match({"id": "m1", "teams": ["Nepal", "Oman", ""]})
        assert [t.name for t in match.teams] == ["Nepal", "Oman"]

    def test_bad_date_is_none(self):
        assert parse_match({"id": "m1", "dateTimeGMT": "tomorrow-ish"}).start_time is None

    def test_identity_falls_back_to_name(self):
        assert parse_match({"name": "A vs B"}).id == "A vs B"

    def test_no_identity_is_skipped(self):
        assert parse_match({"status": "Live"}) is None

    def test_started_flag_string(self):
        assert parse_match({"id": "m1", "matchStarted": "true"}).started
        assert not parse_match({"id": "m1", "matchStarted": "false"}).started

    def test_score_dict_shape(self):
        match = parse_match(
            {"id": "m1", "score": {"inning1": {"R": "140", "W": "3", "O": "18.2"}}}
        )
        assert match.innings[0].label == "inning1"
        assert match.innings[0].runs == 140
        assert match.innings[0].overs == 18.2


class TestMatchSource:
    def test_matches_on_date_excludes_unparseable_start(self):
        rows = [
            {"id": "today", "dateTimeGMT": "2025-01-14T09:30:00"},
            {"id": "tomorrow", "dateTimeGMT": "2025-01-15T09:30:00"},
            {"id": "unknown", "dateTimeGMT": ""},
        ]

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=_page(rows, len(rows)))

        source = CricAPIMatchSource(_client(handler))
        assert [m.id for m in source.fetch_matches_on_date(date(2025, 1, 14))] == ["today"]

    def test_safe_variants_degrade_to_empty(self):
        source = CricAPIMatchSource(_client(lambda request: httpx.Response(500), retry_count=1))

        assert source.fetch_current_matches_safe() == []
        assert source.fetch_matches_on_date_safe(date(2025, 1, 14)) == []

    def test_scorecard_non_success_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"status": "failure", "reason": "Invalid match id"})

        with pytest.raises(UpstreamError):
            CricAPIMatchSource(_client(handler)).fetch_scorecard("nope")

    @pytest.mark.parametrize("data", [{}, {"scorecard": [], "score": []}, None])
    def test_scorecard_without_innings_raises(self, data):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"status": "success", "data": data})

        with pytest.raises(UpstreamError, match="not available yet"):
            CricAPIMatchSource(_client(handler)).fetch_scorecard("abc")

    def test_scorecard_without_innings_is_unavailable_to_lookups(self, store):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"status": "success", "data": {}})

        service = MatchService(CricAPIMatchSource(_client(handler)), store)
        with pytest.raises(ScorecardUnavailable):
            service.scorecard("abc")


# =============================================================================
# SCORECARD PARSING
# =============================================================================


class TestParseScorecard:
    def test_batting_and_bowling_rows(self):
        scorecard = parse_scorecard(
            "m1",
            {
                "name": "India vs Australia",
                "status": "India won by 6 wickets",
                "scorecard": [
                    {
                        "inning": "Australia Inning 1",
                        "batting": [
                            {
                                "batsman": {"id": "p1", "name": "Travis Head"},
                                "dismissal-text": "c Kohli b Bumrah",
                                "dismissal": "catch",
                                "r": 45,
                                "b": 30,
                                "4s": 5,
                                "6s": 2,
                                "sr": 150,
                            }
                        ],
                        "bowling": [
                            {
                                "bowler": {"name": "Jasprit Bumrah"},
                                "o": 4,
                                "m": 0,
                                "r": 22,
                                "w": 3,
                                "eco": 5.5,
                                "wd": 1,
                            }
                        ],
                    }
                ],
            },
        )

        assert scorecard.status == "India won by 6 wickets"
        innings = scorecard.innings[0]
        assert innings.title == "Australia Inning 1"
        batter = innings.batting[0]
        assert (batter.name, batter.runs, batter.balls, batter.sixes) == ("Travis Head", 45, 30, 2)
        assert batter.strike_rate == "150"
        bowler = innings.bowling[0]
        assert (bowler.name, bowler.wickets, bowler.wides) == ("Jasprit Bumrah", 3, 1)
        assert bowler.no_balls is None

    def test_missing_names_default_to_dash(self):
        scorecard = parse_scorecard("m1", {"scorecard": [{"batting": [{"r": 3}], "bowling": [{}]}]})
        assert scorecard.innings[0].title == "Innings"
        assert scorecard.innings[0].batting[0].name == "-"
        assert scorecard.innings[0].bowling[0].name == "-"

    def test_info_block_preferred_for_header(self):
        scorecard = parse_scorecard(
            "m1", {"info": {"name": "SL vs IND", "venue": "Colombo"}, "scorecard": []}
        )
        assert (scorecard.name, scorecard.venue) == ("SL vs IND", "Colombo")
