"""Core data types for Wicketarr.

All data structures are dataclasses with attribute access.
Matches are normalized from upstream dicts by the provider layer; the
derived fields (category, gender, liveness) are never stored on them
because upstream status text changes from one poll to the next.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from wicketarr.utilities.constants import (
    DEFAULT_CATEGORY_FILTERS,
    DEFAULT_GENDER_FILTERS,
)


class TenantMode(str, Enum):
    """How a tenant receives updates."""

    CUSTOM = "custom"  # Live-track selected match ids
    DAILY = "daily"  # One automatic summary per day


class Branch(str, Enum):
    """Per-tick state machine branch for a tenant."""

    CUSTOM_LIVE = "custom_live"
    CUSTOM_FALLBACK = "custom_fallback"
    DAILY = "daily"


@dataclass(frozen=True)
class TeamInfo:
    """A participant as reported upstream."""

    name: str
    short_name: str = ""
    image_url: str | None = None


@dataclass(frozen=True)
class Innings:
    """One innings line of a live score."""

    label: str
    runs: int | None = None
    wickets: int | None = None
    overs: float | None = None


@dataclass
class Match:
    """A single cricket match record."""

    id: str
    name: str = ""
    series: str = ""
    venue: str = ""
    status: str = ""
    match_type: str = ""
    start_time: datetime | None = None  # Aware UTC, None if missing/unparseable
    teams: list[TeamInfo] = field(default_factory=list)
    innings: list[Innings] = field(default_factory=list)
    started: bool = False
    raw: dict = field(default_factory=dict, repr=False)


@dataclass(frozen=True)
class BattingLine:
    """One batter's row on a scorecard."""

    name: str
    dismissal: str = ""
    runs: int = 0
    balls: int = 0
    fours: int = 0
    sixes: int = 0
    strike_rate: str = ""


@dataclass(frozen=True)
class BowlingLine:
    """One bowler's row on a scorecard."""

    name: str
    overs: float = 0
    maidens: int = 0
    runs: int = 0
    wickets: int = 0
    economy: str = ""
    wides: int | None = None
    no_balls: int | None = None
    dots: int | None = None


@dataclass
class ScorecardInnings:
    """Batting and bowling for one innings."""

    title: str
    batting: list[BattingLine] = field(default_factory=list)
    bowling: list[BowlingLine] = field(default_factory=list)


@dataclass
class Scorecard:
    """Detailed per-innings data for one match."""

    match_id: str
    name: str = ""
    series: str = ""
    venue: str = ""
    status: str = ""
    innings: list[ScorecardInnings] = field(default_factory=list)


@dataclass
class TenantConfig:
    """Durable per-tenant configuration and scheduling bookkeeping.

    Admin-facing fields are written by the service layer; the next_due_*
    fields are owned by the tick scheduler, one per state machine branch.
    """

    tenant_id: str
    channel_target: str | None = None
    mode: TenantMode = TenantMode.DAILY
    category_filters: list[str] = field(default_factory=lambda: list(DEFAULT_CATEGORY_FILTERS))
    gender_filters: list[str] = field(default_factory=lambda: list(DEFAULT_GENDER_FILTERS))
    team_filters: list[str] = field(default_factory=list)
    selected_match_ids: list[str] = field(default_factory=list)
    daily_time: str = "2100"
    ping_enabled: bool = False
    ping_role_ids: list[str] = field(default_factory=list)
    is_paused: bool = False

    # Epoch seconds; None until the owning branch first runs
    next_due_custom: int | None = None
    next_due_daily_fallback: int | None = None
    next_due_daily_summary: int | None = None

    @property
    def is_enabled(self) -> bool:
        """Eligible for scheduling: not paused and has somewhere to post."""
        return not self.is_paused and bool(self.channel_target)
