"""Abstract interfaces for Wicketarr.

Defines the contracts between the scheduling core and its collaborators:
the match data source, the publisher that posts to a tenant's channel,
and the durable tenant state store.
"""

import logging
from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from dataclasses import dataclass, field
from datetime import date
from typing import Protocol

from wicketarr.core.exceptions import UpstreamError
from wicketarr.core.types import Match, Scorecard, TenantConfig

logger = logging.getLogger(__name__)

# =============================================================================
# MATCH SOURCE
# =============================================================================


class MatchSource(ABC):
    """Abstract base class for upstream match data.

    Implementations fetch raw collections and normalize them into Match
    records. They never classify. The plain fetch methods raise
    UpstreamError; the *_safe variants are for scheduled contexts and
    degrade to an empty list.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Source identifier (e.g., 'cricapi')."""
        ...

    @abstractmethod
    def fetch_current_matches(self) -> list[Match]:
        """All matches upstream considers current, fully paginated."""
        ...

    @abstractmethod
    def fetch_matches_on_date(self, day: date) -> list[Match]:
        """Scheduled matches whose UTC start date equals day."""
        ...

    @abstractmethod
    def fetch_scorecard(self, match_id: str) -> Scorecard:
        """Detailed scorecard for one match."""
        ...

    def fetch_current_matches_safe(self) -> list[Match]:
        """fetch_current_matches(), returning [] on any upstream failure."""
        try:
            return self.fetch_current_matches()
        except UpstreamError as e:
            logger.warning("[%s] Current matches unavailable this cycle: %s", self.name, e)
            return []

    def fetch_matches_on_date_safe(self, day: date) -> list[Match]:
        """fetch_matches_on_date(), returning [] on any upstream failure."""
        try:
            return self.fetch_matches_on_date(day)
        except UpstreamError as e:
            logger.warning("[%s] Matches for %s unavailable this cycle: %s", self.name, day, e)
            return []


# =============================================================================
# PUBLISHER
# =============================================================================


@dataclass(frozen=True)
class MentionPolicy:
    """Which mentions a post is allowed to trigger."""

    role_ids: tuple[str, ...] = ()

    @property
    def pings(self) -> bool:
        return bool(self.role_ids)

    def content(self) -> str | None:
        """Mention text for the configured roles, or None."""
        if not self.role_ids:
            return None
        return " ".join(f"<@&{r}>" for r in self.role_ids)


NO_MENTIONS = MentionPolicy()


@dataclass
class Post:
    """A single outgoing message."""

    channel_target: str
    content: str | None = None
    embeds: list[dict] = field(default_factory=list)
    mentions: MentionPolicy = NO_MENTIONS


class Publisher(Protocol):
    """Posts items to a tenant's channel.

    Returns True on success. Implementations may raise PublishError or
    return False; callers in the scheduler treat both as a logged failure.
    """

    def post(self, post: Post) -> bool:
        ...


# =============================================================================
# TENANT STATE STORE
# =============================================================================


class TenantStateStore(Protocol):
    """Durable per-tenant configuration.

    upsert() is a field-level merge: only the given fields are written, so
    bookkeeping updates never clobber concurrently written admin fields.
    """

    def get(self, tenant_id: str) -> TenantConfig | None:
        ...

    def ensure(self, tenant_id: str, **defaults) -> TenantConfig:
        ...

    def upsert(self, tenant_id: str, **fields) -> TenantConfig:
        ...

    def list_tenants(self) -> list[TenantConfig]:
        ...

    def lock(self, tenant_id: str) -> AbstractContextManager:
        ...
