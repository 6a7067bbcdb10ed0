"""Match classification.

Pure functions mapping a Match to its category, gender, liveness and
finished-ness. No state, no I/O. Everything is recomputed from the raw
fields on every call because upstream status text changes between polls.

Category precedence (classify_category) is load-bearing:
1. Regional domestic (Indian state sides / domestic series) -> first-class or domestic
2. Franchise league
3. First-class competition or multi-day match type
4. Domestic limited-overs competition or domestic T20 match type
5. Strong international marker
6. Domestic (fail-safe default)
"""

import re
from datetime import date

from wicketarr.core.types import Match
from wicketarr.utilities.constants import (
    CATEGORY_DOMESTIC,
    CATEGORY_FIRST_CLASS,
    CATEGORY_FRANCHISE,
    CATEGORY_INTERNATIONAL,
    DOMESTIC_LIMITED_OVERS_MATCH_TYPES,
    DOMESTIC_LIMITED_OVERS_SERIES,
    DOMESTIC_T20_MATCH_TYPE,
    FINISHED_STATUS_PATTERN,
    FIRST_CLASS_MATCH_TYPES,
    FIRST_CLASS_SERIES,
    FRANCHISE_SERIES,
    GENDER_MEN,
    GENDER_WOMEN,
    INTERNATIONAL_MATCH_TYPE_PATTERN,
    INTERNATIONAL_SERIES,
    INTERNATIONAL_T20_MATCH_TYPE,
    LIVE_STATUS_PATTERN,
    REGIONAL_DOMESTIC_SERIES,
    REGIONAL_DOMESTIC_TEAMS,
    REGIONAL_FIRST_CLASS_SERIES,
    WOMEN_SERIES_MARKERS,
    WOMEN_SHORT_NAME_PATTERN,
    WOMEN_TEAM_MARKER,
)

_WHITESPACE_RE = re.compile(r"\s+")
_LIVE_RE = re.compile(LIVE_STATUS_PATTERN, re.IGNORECASE)
_FINISHED_RE = re.compile(FINISHED_STATUS_PATTERN, re.IGNORECASE)
_INTL_MATCH_TYPE_RE = re.compile(INTERNATIONAL_MATCH_TYPE_PATTERN)
_WOMEN_SHORT_RE = re.compile(WOMEN_SHORT_NAME_PATTERN)


def normalize_text(value: object) -> str:
    """Lowercase, trim and collapse whitespace. None becomes ''."""
    if value is None:
        return ""
    return _WHITESPACE_RE.sub(" ", str(value).strip().lower())


def _contains_any(text: str, fragments: tuple[str, ...]) -> bool:
    return any(fragment in text for fragment in fragments)


def series_text(match: Match) -> str:
    """Normalized series name, falling back to the match name."""
    return normalize_text(match.series or match.name)


def team_names_text(match: Match) -> str:
    """All participant names and short names, normalized and space-joined."""
    parts = []
    for team in match.teams:
        for value in (team.name, team.short_name):
            normalized = normalize_text(value)
            if normalized:
                parts.append(normalized)
    return " ".join(parts)


# =============================================================================
# CATEGORY
# =============================================================================


def is_regional_domestic(match: Match) -> bool:
    """Whether the match belongs to the Indian domestic structure.

    True if the series matches a known Indian domestic competition, or any
    participant name contains a state/region team name.
    """
    if _contains_any(series_text(match), REGIONAL_DOMESTIC_SERIES):
        return True
    return _contains_any(team_names_text(match), REGIONAL_DOMESTIC_TEAMS)


def _is_multi_day_type(match_type: str) -> bool:
    return _contains_any(match_type, FIRST_CLASS_MATCH_TYPES)


def classify_category(match: Match) -> str:
    """Classify a match as international, domestic, first-class or franchise."""
    series = series_text(match)
    match_type = normalize_text(match.match_type)

    if is_regional_domestic(match):
        if _contains_any(series, REGIONAL_FIRST_CLASS_SERIES) or _is_multi_day_type(match_type):
            return CATEGORY_FIRST_CLASS
        return CATEGORY_DOMESTIC

    if _contains_any(series, FRANCHISE_SERIES):
        return CATEGORY_FRANCHISE

    if _contains_any(series, FIRST_CLASS_SERIES) or _is_multi_day_type(match_type):
        return CATEGORY_FIRST_CLASS

    domestic_t20 = (
        DOMESTIC_T20_MATCH_TYPE in match_type and INTERNATIONAL_T20_MATCH_TYPE not in match_type
    )
    if (
        _contains_any(series, DOMESTIC_LIMITED_OVERS_SERIES)
        or _contains_any(match_type, DOMESTIC_LIMITED_OVERS_MATCH_TYPES)
        or domestic_t20
    ):
        return CATEGORY_DOMESTIC

    if _contains_any(series, INTERNATIONAL_SERIES) or _INTL_MATCH_TYPE_RE.search(match_type):
        return CATEGORY_INTERNATIONAL

    return CATEGORY_DOMESTIC


# =============================================================================
# GENDER
# =============================================================================


def classify_gender(match: Match) -> str:
    """Classify a match as men or women. Unknown defaults to men."""
    if _contains_any(series_text(match), WOMEN_SERIES_MARKERS):
        return GENDER_WOMEN

    if WOMEN_TEAM_MARKER in " " + team_names_text(match):
        return GENDER_WOMEN

    for team in match.teams:
        if _WOMEN_SHORT_RE.search(normalize_text(team.short_name)):
            return GENDER_WOMEN

    return GENDER_MEN


# =============================================================================
# LIVENESS
# =============================================================================


def is_finished(match: Match) -> bool:
    """Status text says the match (or the day's play) is over."""
    return bool(_FINISHED_RE.search(normalize_text(match.status)))


def is_live(match: Match) -> bool:
    """Whether the match is in progress.

    Two paths: the status reads like live play, or upstream flags the match
    as started and the status is not finished. Upstream leaves some live
    matches with empty or ambiguous status text, hence the second path.
    A finished status is never live ("Day 3: Stumps", "won by an innings").
    """
    if is_finished(match):
        return False
    if _LIVE_RE.search(normalize_text(match.status)):
        return True
    return match.started


def is_scheduled_today_or_live(match: Match, today: date) -> bool:
    """Starts on `today` (UTC calendar date) or is live right now.

    Matches with a missing or unparseable start time can still surface
    through liveness.
    """
    if match.start_time is not None and match.start_time.date() == today:
        return True
    return is_live(match)
