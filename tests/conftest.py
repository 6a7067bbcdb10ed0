"""Shared fixtures: temp database, fake match source, recording publisher, fixed clock."""

import os
from datetime import UTC, date, datetime

import pytest

from wicketarr.config import SchedulerSettings
from wicketarr.core.exceptions import UpstreamError
from wicketarr.core.interfaces import MatchSource, Post
from wicketarr.core.types import Match, Scorecard, TeamInfo
from wicketarr.database import SqliteTenantStore, init_db

# App startup in API tests must not write log files into the source tree
os.environ.setdefault("LOG_TO_FILE", "false")

WEBHOOK = "https://hooks.example.test/webhooks/1/token"


def epoch(year, month, day, hour=0, minute=0, second=0) -> float:
    return datetime(year, month, day, hour, minute, second, tzinfo=UTC).timestamp()


def make_match(
    match_id: str,
    teams: tuple[str, ...] = ("India", "Australia"),
    series: str = "Australia tour of India, 2025",
    match_type: str = "t20i",
    status: str = "Match starts at 14:00 GMT",
    start_time: datetime | None = None,
    started: bool = False,
    short_names: tuple[str, ...] = (),
) -> Match:
    team_infos = [
        TeamInfo(name=name, short_name=short_names[i] if i < len(short_names) else "")
        for i, name in enumerate(teams)
    ]
    return Match(
        id=match_id,
        name=" vs ".join(teams),
        series=series,
        venue="Somewhere Stadium",
        status=status,
        match_type=match_type,
        start_time=start_time,
        teams=team_infos,
        started=started,
    )


# =============================================================================
# FAKES
# =============================================================================


class FakeMatchSource(MatchSource):
    """In-memory MatchSource.

    current_errors / date_errors are consumed one per call; a None entry
    means that call succeeds.
    """

    def __init__(self):
        self.current: list[Match] = []
        self.by_date: dict[date, list[Match]] = {}
        self.scorecards: dict[str, Scorecard] = {}
        self.current_errors: list[Exception | None] = []
        self.date_errors: list[Exception | None] = []
        self.current_calls = 0
        self.date_calls: list[date] = []
        self.scorecard_calls: list[str] = []

    @property
    def name(self) -> str:
        return "fake"

    def fetch_current_matches(self) -> list[Match]:
        self.current_calls += 1
        if self.current_errors:
            error = self.current_errors.pop(0)
            if error is not None:
                raise error
        return list(self.current)

    def fetch_matches_on_date(self, day: date) -> list[Match]:
        self.date_calls.append(day)
        if self.date_errors:
            error = self.date_errors.pop(0)
            if error is not None:
                raise error
        return list(self.by_date.get(day, []))

    def fetch_scorecard(self, match_id: str) -> Scorecard:
        self.scorecard_calls.append(match_id)
        if match_id not in self.scorecards:
            raise UpstreamError(f"no scorecard for {match_id}")
        return self.scorecards[match_id]


class RecordingPublisher:
    """Publisher that records every post and reports success unless told to fail."""

    def __init__(self):
        self.posts: list[Post] = []
        self.fail = False

    def post(self, post: Post) -> bool:
        if self.fail:
            return False
        self.posts.append(post)
        return True


class FixedClock:
    """Callable clock returning a settable epoch time."""

    def __init__(self, now: float):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def db_path(tmp_path):
    path = tmp_path / "wicketarr.db"
    init_db(path)
    return path


@pytest.fixture
def store(db_path):
    return SqliteTenantStore(db_path)


@pytest.fixture
def source():
    return FakeMatchSource()


@pytest.fixture
def publisher():
    return RecordingPublisher()


@pytest.fixture
def settings():
    return SchedulerSettings(
        poll_seconds=600,
        idle_backoff_seconds=1800,
        default_daily_time="2100",
        post_batch_size=8,
        throttle_grace_seconds=5,
        timezone="UTC",
    )


@pytest.fixture
def clock():
    # 2025-01-14 20:00:00 UTC
    return FixedClock(epoch(2025, 1, 14, 20, 0))
