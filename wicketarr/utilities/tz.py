"""Time utilities.

Single source of truth for all date arithmetic used by scheduling:
UTC calendar dates for upstream match data, and next occurrence of a
tenant's HHMM daily time in the configured summary timezone.
"""

import re
from datetime import UTC, date, datetime, timedelta
from zoneinfo import ZoneInfo

from croniter import croniter

_HHMM_RE = re.compile(r"^([01]\d|2[0-3])([0-5]\d)$")

SECONDS_PER_DAY = 86400

__all__ = [
    "SECONDS_PER_DAY",
    "is_valid_hhmm",
    "next_occurrence_epoch",
    "now_epoch",
    "now_utc",
    "parse_hhmm",
    "parse_upstream_datetime",
    "utc_date_of",
    "utc_today",
    "utc_tomorrow",
]


def now_utc() -> datetime:
    """Get current time in UTC."""
    return datetime.now(UTC)


def now_epoch() -> float:
    """Get current time as epoch seconds."""
    return now_utc().timestamp()


def utc_date_of(epoch_seconds: float) -> date:
    """UTC calendar date of an epoch timestamp."""
    return datetime.fromtimestamp(epoch_seconds, UTC).date()


def utc_today(epoch_seconds: float | None = None) -> date:
    """UTC calendar date for now (or for the given epoch timestamp)."""
    if epoch_seconds is None:
        return now_utc().date()
    return utc_date_of(epoch_seconds)


def utc_tomorrow(epoch_seconds: float | None = None) -> date:
    """UTC calendar date one day after utc_today()."""
    return utc_today(epoch_seconds) + timedelta(days=1)


def is_valid_hhmm(value: str | None) -> bool:
    """Check a 24h HHMM string such as '0930' or '2100'."""
    return bool(value) and _HHMM_RE.match(value) is not None


def parse_hhmm(value: str | None, fallback: str = "2100") -> tuple[int, int]:
    """Parse HHMM into (hour, minute), using fallback for malformed input."""
    match = _HHMM_RE.match(value or "") or _HHMM_RE.match(fallback) or _HHMM_RE.match("2100")
    return int(match.group(1)), int(match.group(2))


def next_occurrence_epoch(
    hhmm: str | None,
    now_epoch_seconds: float,
    tz: ZoneInfo | None = None,
    fallback: str = "2100",
) -> int:
    """Epoch seconds of the next wall-clock HHMM strictly after now.

    If today's HHMM has not passed yet it is today's, otherwise tomorrow's.
    Evaluated in tz (UTC when not given), so DST shifts move the UTC instant
    rather than the local slot.
    """
    hour, minute = parse_hhmm(hhmm, fallback)
    zone = tz or ZoneInfo("UTC")
    start = datetime.fromtimestamp(now_epoch_seconds, zone)
    cron = croniter(f"{minute} {hour} * * *", start)
    return int(cron.get_next(datetime).timestamp())


def parse_upstream_datetime(value: object) -> datetime | None:
    """Parse an upstream GMT timestamp into an aware UTC datetime.

    Upstream sends ISO strings without an offset ('2025-01-14T09:30:00')
    which are GMT. Anything unparseable returns None rather than raising.
    """
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)
