"""Core types and interfaces."""

from wicketarr.core.exceptions import (
    InvalidTenantSetting,
    PersistenceError,
    PublishError,
    ScorecardUnavailable,
    UpstreamError,
    WicketarrError,
)
from wicketarr.core.interfaces import (
    NO_MENTIONS,
    MatchSource,
    MentionPolicy,
    Post,
    Publisher,
    TenantStateStore,
)
from wicketarr.core.types import (
    BattingLine,
    BowlingLine,
    Branch,
    Innings,
    Match,
    Scorecard,
    ScorecardInnings,
    TeamInfo,
    TenantConfig,
    TenantMode,
)

__all__ = [
    # Exceptions
    "InvalidTenantSetting",
    "PersistenceError",
    "PublishError",
    "ScorecardUnavailable",
    "UpstreamError",
    "WicketarrError",
    # Interfaces
    "NO_MENTIONS",
    "MatchSource",
    "MentionPolicy",
    "Post",
    "Publisher",
    "TenantStateStore",
    # Types
    "BattingLine",
    "BowlingLine",
    "Branch",
    "Innings",
    "Match",
    "Scorecard",
    "ScorecardInnings",
    "TeamInfo",
    "TenantConfig",
    "TenantMode",
]
