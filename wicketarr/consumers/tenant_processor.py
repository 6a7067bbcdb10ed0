"""Tenant Processor - runs one tick of the per-tenant state machine.

Exactly one branch runs per tenant per tick:

- custom_live: mode=custom with selected match ids. Posts throttled score
  updates for live matches, a final scorecard for finished ones.
- custom_fallback: mode=custom with nothing selected. Once a day, a summary
  of today's international / Indian domestic matches.
- daily: mode=daily. Once a day, a summary of today's matches passing the
  tenant's filters.

Both daily branches finish with tomorrow's international fixtures.

The processor never raises for upstream, publish or persistence failures:
they are logged and the tick carries on. The caller (TickScheduler) holds
the tenant lock for the duration of process().
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from wicketarr.config import SchedulerSettings
from wicketarr.consumers.classifier import is_finished, is_live, is_scheduled_today_or_live
from wicketarr.consumers.filters import (
    TenantFilters,
    is_fallback_relevant,
    is_relevant,
    is_tomorrow_relevant,
)
from wicketarr.consumers.throttle import PostThrottle
from wicketarr.core.exceptions import PersistenceError, PublishError, UpstreamError
from wicketarr.core.interfaces import (
    NO_MENTIONS,
    MatchSource,
    MentionPolicy,
    Post,
    Publisher,
    TenantStateStore,
)
from wicketarr.core.types import Branch, Match, TenantConfig, TenantMode
from wicketarr.publishers.embeds import (
    FINAL_SCORECARD_CONTENT,
    NO_DAILY_MATCHES,
    NO_FALLBACK_MATCHES,
    match_embed,
    scorecard_embeds,
    stopped_tracking_notice,
    tomorrow_listing,
)
from wicketarr.utilities.tz import (
    SECONDS_PER_DAY,
    next_occurrence_epoch,
    utc_today,
    utc_tomorrow,
)

logger = logging.getLogger(__name__)


@dataclass
class ProcessResult:
    """Outcome of processing one tenant for one tick."""

    tenant_id: str
    branch: Branch
    fired: bool = False
    posts: int = 0
    failed_posts: int = 0
    state_writes: int = 0
    skipped_reason: str | None = None
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dict for JSON serialization."""
        return {
            "tenant_id": self.tenant_id,
            "branch": self.branch.value,
            "fired": self.fired,
            "posts": self.posts,
            "failed_posts": self.failed_posts,
            "state_writes": self.state_writes,
            "skipped_reason": self.skipped_reason,
            "errors": self.errors,
        }


def mention_policy(cfg: TenantConfig) -> MentionPolicy:
    """Role pings are only allowed when enabled and at least one role is set."""
    if cfg.ping_enabled and cfg.ping_role_ids:
        return MentionPolicy(role_ids=tuple(cfg.ping_role_ids))
    return NO_MENTIONS


def _with_mentions(text: str, mentions: MentionPolicy) -> str:
    prefix = mentions.content()
    return f"{prefix}\n{text}" if prefix else text


def throttle_key(tenant_id: str, match_id: str) -> str:
    """Throttle key for one tenant tracking one match.

    Keyed by tenant as well as match id rather than by match id alone, so
    tenants tracking the same match keep independent post cadences.
    """
    return f"{tenant_id}:{match_id}"


def _chunks(items: list, size: int) -> list[list]:
    size = max(1, size)
    return [items[i : i + size] for i in range(0, len(items), size)]


class TenantProcessor:
    """Runs the selected branch for one tenant.

    Usage:
        processor = TenantProcessor(source, publisher, store, throttle, settings)
        result = processor.process(tenant_config, now=time.time())
    """

    def __init__(
        self,
        source: MatchSource,
        publisher: Publisher,
        store: TenantStateStore,
        throttle: PostThrottle,
        settings: SchedulerSettings | None = None,
    ):
        self._source = source
        self._publisher = publisher
        self._store = store
        self._throttle = throttle
        self._settings = settings or SchedulerSettings()

    @property
    def settings(self) -> SchedulerSettings:
        return self._settings

    @staticmethod
    def select_branch(cfg: TenantConfig) -> Branch:
        """The single branch eligible for this tenant configuration."""
        if cfg.mode == TenantMode.CUSTOM:
            if cfg.selected_match_ids:
                return Branch.CUSTOM_LIVE
            return Branch.CUSTOM_FALLBACK
        return Branch.DAILY

    def process(self, cfg: TenantConfig, now: float) -> ProcessResult:
        branch = self.select_branch(cfg)
        result = ProcessResult(tenant_id=cfg.tenant_id, branch=branch)

        if branch == Branch.CUSTOM_LIVE:
            self._process_custom_live(cfg, now, result)
        elif branch == Branch.CUSTOM_FALLBACK:
            self._process_daily(
                cfg,
                now,
                result,
                due_field="next_due_daily_fallback",
                relevant=is_fallback_relevant,
                empty_message=NO_FALLBACK_MATCHES,
            )
        else:
            self._process_daily(
                cfg,
                now,
                result,
                due_field="next_due_daily_summary",
                relevant=is_relevant,
                empty_message=NO_DAILY_MATCHES,
            )

        if result.fired:
            logger.info(
                "[TENANT] %s %s: %d posts (%d failed), %d state writes",
                cfg.tenant_id,
                branch.value,
                result.posts,
                result.failed_posts,
                result.state_writes,
            )
        return result

    # =========================================================================
    # CUSTOM / LIVE
    # =========================================================================

    def _process_custom_live(self, cfg: TenantConfig, now: float, result: ProcessResult) -> None:
        if cfg.next_due_custom is not None and now < cfg.next_due_custom:
            result.skipped_reason = "not due"
            return
        result.fired = True

        filters = TenantFilters.from_config(cfg)
        mentions = mention_policy(cfg)
        selected = set(cfg.selected_match_ids)
        any_live = False

        for match in self._source.fetch_current_matches_safe():
            if match.id not in selected or not is_relevant(match, filters):
                continue
            if is_finished(match):
                self._finish_tracking(cfg, match, result)
            elif is_live(match):
                any_live = True
                key = throttle_key(cfg.tenant_id, match.id)
                if self._throttle.is_due(key, now, self._settings.poll_seconds):
                    post = Post(
                        channel_target=cfg.channel_target,
                        content=mentions.content(),
                        embeds=[match_embed(match)],
                        mentions=mentions,
                    )
                    if self._publish(post, result):
                        self._throttle.mark_posted(key, now)

        interval = (
            self._settings.poll_seconds if any_live else self._settings.idle_backoff_seconds
        )
        self._persist(cfg, result, next_due_custom=int(now + interval))

    def _finish_tracking(self, cfg: TenantConfig, match: Match, result: ProcessResult) -> None:
        """Final scorecard (best effort), drop the id, persist, then the notice."""
        logger.info("[TENANT] %s: match %s finished (%s)", cfg.tenant_id, match.id, match.status)
        try:
            scorecard = self._source.fetch_scorecard(match.id)
        except UpstreamError as e:
            logger.warning("[TENANT] Final scorecard for %s unavailable: %s", match.id, e)
        else:
            self._publish(
                Post(
                    channel_target=cfg.channel_target,
                    content=FINAL_SCORECARD_CONTENT,
                    embeds=scorecard_embeds(scorecard),
                ),
                result,
            )

        remaining = [mid for mid in cfg.selected_match_ids if mid != match.id]
        self._persist(cfg, result, selected_match_ids=remaining)
        self._throttle.forget(throttle_key(cfg.tenant_id, match.id))
        self._publish(
            Post(channel_target=cfg.channel_target, content=stopped_tracking_notice(match.id)),
            result,
        )

    # =========================================================================
    # DAILY (custom fallback and daily summary)
    # =========================================================================

    def _process_daily(
        self,
        cfg: TenantConfig,
        now: float,
        result: ProcessResult,
        due_field: str,
        relevant: Callable[[Match, TenantFilters], bool],
        empty_message: str,
    ) -> None:
        next_due = getattr(cfg, due_field)
        if next_due is None:
            first = next_occurrence_epoch(
                cfg.daily_time,
                now,
                tz=self._settings.tz,
                fallback=self._settings.default_daily_time,
            )
            logger.info("[TENANT] %s: %s initialized to %d", cfg.tenant_id, due_field, first)
            self._persist(cfg, result, **{due_field: first})
            result.skipped_reason = "initialized"
            return
        if now < next_due:
            result.skipped_reason = "not due"
            return
        result.fired = True

        filters = TenantFilters.from_config(cfg)
        mentions = mention_policy(cfg)
        today = utc_today(now)

        # Current data wins on identity collision
        merged: dict[str, Match] = {}
        for match in self._source.fetch_matches_on_date_safe(today):
            merged[match.id] = match
        for match in self._source.fetch_current_matches_safe():
            merged[match.id] = match

        matches = [
            m
            for m in merged.values()
            if relevant(m, filters) and is_scheduled_today_or_live(m, today)
        ]

        if matches:
            for index, batch in enumerate(_chunks(matches, self._settings.post_batch_size)):
                first_batch = index == 0
                self._publish(
                    Post(
                        channel_target=cfg.channel_target,
                        content=mentions.content() if first_batch else None,
                        embeds=[match_embed(m) for m in batch],
                        mentions=mentions if first_batch else NO_MENTIONS,
                    ),
                    result,
                )
        else:
            self._publish(
                Post(
                    channel_target=cfg.channel_target,
                    content=_with_mentions(empty_message, mentions),
                    mentions=mentions,
                ),
                result,
            )

        self._post_tomorrow_fixtures(cfg, now, filters, result)

        # Whole days from the previous slot; a late tick never shifts the slot
        days = int((now - next_due) // SECONDS_PER_DAY) + 1
        self._persist(cfg, result, **{due_field: int(next_due + days * SECONDS_PER_DAY)})

    def _post_tomorrow_fixtures(
        self,
        cfg: TenantConfig,
        now: float,
        filters: TenantFilters,
        result: ProcessResult,
    ) -> None:
        tomorrow = utc_tomorrow(now)
        fixtures = [
            m
            for m in self._source.fetch_matches_on_date_safe(tomorrow)
            if is_tomorrow_relevant(m, filters)
        ]
        fixtures.sort(key=lambda m: m.start_time.timestamp() if m.start_time else float("inf"))
        self._publish(
            Post(channel_target=cfg.channel_target, content=tomorrow_listing(fixtures)),
            result,
        )

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _publish(self, post: Post, result: ProcessResult) -> bool:
        try:
            ok = bool(self._publisher.post(post))
        except PublishError as e:
            logger.warning("[PUBLISH] Post to tenant %s failed: %s", result.tenant_id, e)
            ok = False
        if ok:
            result.posts += 1
        else:
            result.failed_posts += 1
        return ok

    def _persist(self, cfg: TenantConfig, result: ProcessResult, **fields) -> None:
        """Field-level write of bookkeeping. The in-memory copy is updated either way."""
        for name, value in fields.items():
            setattr(cfg, name, value)
        try:
            self._store.upsert(cfg.tenant_id, **fields)
            result.state_writes += 1
        except PersistenceError as e:
            logger.error(
                "[DB] Failed to persist %s for tenant %s: %s", sorted(fields), cfg.tenant_id, e
            )
            result.errors.append(str(e))
