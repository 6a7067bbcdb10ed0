"""Exception hierarchy.

Scheduled code paths catch these and carry on; direct lookups let them
reach the API layer, which maps them to HTTP responses.
"""


class WicketarrError(Exception):
    """Base class for all application errors."""


class UpstreamError(WicketarrError):
    """Upstream match data could not be fetched or parsed."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ScorecardUnavailable(WicketarrError):
    """A user-initiated scorecard lookup failed upstream. Try again later."""

    def __init__(self, match_id: str, reason: str = ""):
        super().__init__(f"Scorecard for {match_id} unavailable: {reason}" if reason else match_id)
        self.match_id = match_id
        self.reason = reason


class InvalidTenantSetting(WicketarrError):
    """An admin operation supplied a value outside the allowed set."""


class PublishError(WicketarrError):
    """A post could not be delivered to the tenant's channel."""


class PersistenceError(WicketarrError):
    """The tenant state store could not be read or written."""
