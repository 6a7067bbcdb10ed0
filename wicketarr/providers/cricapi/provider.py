"""CricAPI match source.

Normalizes raw CricAPI records into Match and Scorecard dataclasses.
Upstream fields are absent or inconsistently typed often enough that every
parser here defaults instead of raising.
"""

import logging
from datetime import date

from wicketarr.core.exceptions import UpstreamError
from wicketarr.core.interfaces import MatchSource
from wicketarr.core.types import (
    BattingLine,
    BowlingLine,
    Innings,
    Match,
    Scorecard,
    ScorecardInnings,
    TeamInfo,
)
from wicketarr.providers.cricapi.client import CricAPIClient
from wicketarr.utilities.tz import parse_upstream_datetime

logger = logging.getLogger(__name__)

_ID_FIELDS = ("id", "unique_id", "matchId", "name")
_NAME_KEYS = ("name", "fullName", "fullname", "shortName", "playerName", "text", "kind", "howOut")
_MAX_INNINGS = 4


# =============================================================================
# FIELD HELPERS
# =============================================================================


def match_identity(raw: dict) -> str:
    """First present of the upstream id fields, as a string."""
    for key in _ID_FIELDS:
        value = raw.get(key)
        if value is not None and str(value).strip():
            return str(value)
    return ""


def pick_string(value: object, *keys: str) -> str:
    """Best-effort display string from a string, a dict, or nested dicts."""
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        for key in _NAME_KEYS:
            candidate = value.get(key)
            if isinstance(candidate, str) and candidate.strip():
                return candidate
        for key in keys:
            candidate = value.get(key)
            if isinstance(candidate, str) and candidate.strip():
                return candidate
            if isinstance(candidate, dict):
                nested = pick_string(candidate)
                if nested:
                    return nested
    return ""


def pick_number(row: dict, keys: tuple[str, ...], fallback=0):
    """First key whose value converts to a number."""
    for key in keys:
        value = row.get(key)
        if value is None:
            continue
        try:
            number = float(value)
        except (TypeError, ValueError):
            continue
        return int(number) if number.is_integer() else number
    return fallback


def _as_text(value: object) -> str:
    return value if isinstance(value, str) else ("" if value is None else str(value))


def _is_true(value: object) -> bool:
    return str(value).strip().lower() == "true"


# =============================================================================
# MATCH PARSING
# =============================================================================


def _parse_teams(raw: dict) -> list[TeamInfo]:
    teams = []
    for info in raw.get("teamInfo") or []:
        if not isinstance(info, dict):
            continue
        name = _as_text(info.get("name"))
        short = _as_text(info.get("shortname") or info.get("shortName"))
        if name or short:
            teams.append(TeamInfo(name=name, short_name=short, image_url=info.get("img")))
    if teams:
        return teams
    # Some records only carry the plain team name list
    return [TeamInfo(name=t) for t in raw.get("teams") or [] if isinstance(t, str) and t]


def _parse_innings_entry(entry: dict, default_label: str) -> Innings:
    overs = pick_number(entry, ("o", "O"), None)
    return Innings(
        label=_as_text(entry.get("inning")) or default_label,
        runs=pick_number(entry, ("r", "R"), None),
        wickets=pick_number(entry, ("w", "W"), None),
        overs=overs,
    )


def _parse_innings(raw: dict) -> list[Innings]:
    score = raw.get("score")
    innings: list[Innings] = []
    if isinstance(score, list):
        for index, entry in enumerate(score):
            if isinstance(entry, dict):
                innings.append(_parse_innings_entry(entry, f"inning{index + 1}"))
    elif isinstance(score, dict):
        for index in range(1, _MAX_INNINGS + 1):
            key = f"inning{index}"
            entry = score.get(key)
            if isinstance(entry, dict):
                innings.append(_parse_innings_entry(entry, key))
    return innings[:_MAX_INNINGS]


def parse_match(raw: dict) -> Match | None:
    """Normalize one upstream match record. None if it has no identity."""
    match_id = match_identity(raw)
    if not match_id:
        return None
    return Match(
        id=match_id,
        name=_as_text(raw.get("name")),
        series=_as_text(raw.get("series")),
        venue=_as_text(raw.get("venue")),
        status=_as_text(raw.get("status")),
        match_type=_as_text(raw.get("matchType")),
        start_time=parse_upstream_datetime(raw.get("dateTimeGMT")),
        teams=_parse_teams(raw),
        innings=_parse_innings(raw),
        started=_is_true(raw.get("matchStarted")),
        raw=raw,
    )


def parse_matches(rows: list[dict]) -> list[Match]:
    matches = []
    for row in rows:
        match = parse_match(row)
        if match is None:
            logger.debug("[CRICAPI] Skipping record without identity: %s", list(row)[:8])
            continue
        matches.append(match)
    return matches


# =============================================================================
# SCORECARD PARSING
# =============================================================================


def _dismissal(row: dict) -> str:
    text = pick_string(row.get("out") or row.get("dismissal") or row.get("howOut") or "")
    if text:
        return text
    for key in ("lbw", "bowled", "caught", "runout", "run out"):
        if _is_true(row.get(key)):
            return key
    return ""


def _parse_batting(row: dict) -> BattingLine:
    name = (
        pick_string(row.get("batsman"))
        or pick_string(row.get("player"))
        or pick_string(row.get("name"))
        or pick_string(row.get("striker"))
        or "-"
    )
    strike_rate = next(
        (row[k] for k in ("sr", "SR", "strikeRate", "StrikeRate") if row.get(k) is not None), ""
    )
    return BattingLine(
        name=name,
        dismissal=_dismissal(row),
        runs=pick_number(row, ("r", "R", "runs", "Runs")),
        balls=pick_number(row, ("b", "B", "balls", "bf", "BF")),
        fours=pick_number(row, ("4s", "Fours", "fours", "F4")),
        sixes=pick_number(row, ("6s", "Sixes", "sixes", "S6")),
        strike_rate=str(strike_rate),
    )


def _parse_bowling(row: dict) -> BowlingLine:
    name = (
        pick_string(row.get("bowler"))
        or pick_string(row.get("player"))
        or pick_string(row.get("name"))
        or "-"
    )
    economy = next(
        (
            row[k]
            for k in ("eco", "ECO", "econ", "Econ", "economy", "Economy")
            if row.get(k) is not None
        ),
        "",
    )
    return BowlingLine(
        name=name,
        overs=pick_number(row, ("o", "O", "overs", "Ov", "OV")),
        maidens=pick_number(row, ("m", "M", "maidens", "Mdns", "Md")),
        runs=pick_number(row, ("r", "R", "runs", "Runs")),
        wickets=pick_number(row, ("w", "W", "wkts", "Wkts", "wickets", "Wickets")),
        economy=str(economy),
        wides=pick_number(row, ("wd", "WD", "wides", "Wides"), None),
        no_balls=pick_number(row, ("nb", "NB", "noballs", "NoBalls"), None),
        dots=pick_number(row, ("0s", "dots", "Dots"), None),
    )


def parse_scorecard(match_id: str, data: dict) -> Scorecard:
    """Normalize a match_scorecard payload."""
    info = data.get("info") if isinstance(data.get("info"), dict) else data
    innings = []
    for entry in data.get("scorecard") or data.get("score") or []:
        if not isinstance(entry, dict):
            continue
        batting = entry.get("batting") or entry.get("batsmen") or entry.get("bat") or []
        bowling = entry.get("bowling") or entry.get("bowlers") or entry.get("bowl") or []
        innings.append(
            ScorecardInnings(
                title=_as_text(entry.get("inning") or entry.get("name")) or "Innings",
                batting=[_parse_batting(r) for r in batting if isinstance(r, dict)],
                bowling=[_parse_bowling(r) for r in bowling if isinstance(r, dict)],
            )
        )
    return Scorecard(
        match_id=match_id,
        name=_as_text(info.get("name") or info.get("matchType")),
        series=_as_text(info.get("series")),
        venue=_as_text(info.get("venue")),
        status=_as_text(info.get("status")),
        innings=innings,
    )


# =============================================================================
# MATCH SOURCE
# =============================================================================


class CricAPIMatchSource(MatchSource):
    """MatchSource backed by the CricAPI v1 endpoints."""

    def __init__(self, client: CricAPIClient):
        self._client = client

    @property
    def name(self) -> str:
        return "cricapi"

    @property
    def client(self) -> CricAPIClient:
        return self._client

    def fetch_current_matches(self) -> list[Match]:
        return parse_matches(self._client.get_current_matches())

    def fetch_matches_on_date(self, day: date) -> list[Match]:
        """Scheduled matches starting on day (UTC).

        Records with unparseable start times are left out here; they can
        still surface through fetch_current_matches.
        """
        return [
            m
            for m in parse_matches(self._client.get_matches())
            if m.start_time is not None and m.start_time.date() == day
        ]

    def fetch_scorecard(self, match_id: str) -> Scorecard:
        data = self._client.get_match_scorecard(match_id)
        try:
            scorecard = parse_scorecard(match_id, data)
        except (TypeError, ValueError, AttributeError) as e:
            raise UpstreamError(f"Malformed scorecard for {match_id}: {e}") from e
        # A success envelope with no innings rows is a match not started yet
        if not scorecard.innings:
            raise UpstreamError(f"Scorecard for {match_id} not available yet")
        return scorecard
