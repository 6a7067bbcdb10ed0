"""Tenant admin operations.

Every operation runs under the tenant's lock, so it never interleaves with
the scheduler processing the same tenant. Writes go through the store's
field-level upsert and only touch the fields the operation owns.
"""

import logging

from wicketarr.consumers.tenant_processor import mention_policy
from wicketarr.core.exceptions import InvalidTenantSetting, PublishError
from wicketarr.core.interfaces import Post, Publisher, TenantStateStore
from wicketarr.core.types import TenantConfig, TenantMode
from wicketarr.publishers.embeds import PING_TEST_DISABLED
from wicketarr.utilities.constants import (
    ALL_CATEGORIES,
    ALL_GENDERS,
    DEFAULT_CATEGORY_FILTERS,
    DEFAULT_GENDER_FILTERS,
)
from wicketarr.utilities.tz import is_valid_hhmm

logger = logging.getLogger(__name__)

# Accepted values for set_gender
GENDER_CHOICES: dict[str, tuple[str, ...]] = {
    "men": ("men",),
    "women": ("women",),
    "both": ALL_GENDERS,
}


def _clean(value: str | None) -> str:
    return (value or "").strip()


# =============================================================================
# VALIDATION
# =============================================================================


def _valid_channel(channel_target: str | None) -> str:
    channel_target = _clean(channel_target)
    if not channel_target:
        raise InvalidTenantSetting("Channel target must not be empty")
    return channel_target


def _valid_mode(mode: str | TenantMode) -> TenantMode:
    try:
        return TenantMode(mode)
    except ValueError as e:
        raise InvalidTenantSetting(f"Unknown mode: {mode!r}") from e


def _valid_categories(categories: list[str]) -> list[str]:
    cleaned = []
    for category in categories:
        value = _clean(category).lower()
        if value not in ALL_CATEGORIES:
            raise InvalidTenantSetting(f"Unknown category: {category!r}")
        if value not in cleaned:
            cleaned.append(value)
    if not cleaned:
        raise InvalidTenantSetting("At least one category is required")
    return cleaned


def _valid_genders(choice: str | None) -> list[str]:
    genders = GENDER_CHOICES.get(_clean(choice).lower())
    if genders is None:
        raise InvalidTenantSetting(f"Gender must be one of {sorted(GENDER_CHOICES)}")
    return list(genders)


def _daily_time_fields(hhmm: str | None) -> dict:
    """daily_time plus cleared daily next-due fields, so both daily branches re-initialize."""
    hhmm = _clean(hhmm)
    if not is_valid_hhmm(hhmm):
        raise InvalidTenantSetting(f"Daily time must be HHMM (0000-2359), got {hhmm!r}")
    return {
        "daily_time": hhmm,
        "next_due_daily_fallback": None,
        "next_due_daily_summary": None,
    }


class TenantService:
    """Admin-facing operations on tenant configuration."""

    def __init__(self, store: TenantStateStore, publisher: Publisher | None = None):
        self._store = store
        self._publisher = publisher

    def _update(self, tenant_id: str, **fields) -> TenantConfig:
        with self._store.lock(tenant_id):
            self._store.ensure(tenant_id)
            updated = self._store.upsert(tenant_id, **fields)
        logger.info("[TENANT] %s updated: %s", tenant_id, sorted(fields))
        return updated

    # =========================================================================
    # READ
    # =========================================================================

    def get_or_create(self, tenant_id: str) -> TenantConfig:
        """Tenant config, created with defaults on first access."""
        with self._store.lock(tenant_id):
            return self._store.ensure(tenant_id)

    def list_tenants(self) -> list[TenantConfig]:
        return self._store.list_tenants()

    # =========================================================================
    # CHANNEL AND MODE
    # =========================================================================

    def set_channel(self, tenant_id: str, channel_target: str) -> TenantConfig:
        return self._update(tenant_id, channel_target=_valid_channel(channel_target))

    def set_mode(self, tenant_id: str, mode: str | TenantMode) -> TenantConfig:
        return self._update(tenant_id, mode=_valid_mode(mode))

    def setup(self, tenant_id: str, channel_target: str, mode: str | TenantMode) -> TenantConfig:
        """Set channel and mode in one write."""
        return self._update(
            tenant_id, channel_target=_valid_channel(channel_target), mode=_valid_mode(mode)
        )

    def update_settings(
        self,
        tenant_id: str,
        channel_target: str | None = None,
        mode: str | TenantMode | None = None,
        categories: list[str] | None = None,
        gender: str | None = None,
        daily_time: str | None = None,
        ping_enabled: bool | None = None,
    ) -> TenantConfig:
        """Apply several settings at once. None means leave alone.

        Every supplied value is validated before anything is written, and
        the change is a single write: an invalid value leaves the tenant
        untouched.
        """
        fields: dict = {}
        if channel_target is not None:
            fields["channel_target"] = _valid_channel(channel_target)
        if mode is not None:
            fields["mode"] = _valid_mode(mode)
        if categories is not None:
            fields["category_filters"] = _valid_categories(categories)
        if gender is not None:
            fields["gender_filters"] = _valid_genders(gender)
        if daily_time is not None:
            fields.update(_daily_time_fields(daily_time))
        if ping_enabled is not None:
            fields["ping_enabled"] = bool(ping_enabled)

        if not fields:
            return self.get_or_create(tenant_id)
        return self._update(tenant_id, **fields)

    # =========================================================================
    # FILTERS
    # =========================================================================

    def set_categories(self, tenant_id: str, categories: list[str]) -> TenantConfig:
        """Replace the category filter set. Must be a non-empty subset of known categories."""
        return self._update(tenant_id, category_filters=_valid_categories(categories))

    def set_gender(self, tenant_id: str, choice: str) -> TenantConfig:
        """men, women or both."""
        return self._update(tenant_id, gender_filters=_valid_genders(choice))

    def add_team_filter(self, tenant_id: str, team: str) -> TenantConfig:
        team = _clean(team)
        if not team:
            raise InvalidTenantSetting("Team name must not be empty")
        with self._store.lock(tenant_id):
            cfg = self._store.ensure(tenant_id)
            teams = list(cfg.team_filters)
            if team.lower() in (t.lower() for t in teams):
                return cfg
            teams.append(team)
            return self._update(tenant_id, team_filters=teams)

    def remove_team_filter(self, tenant_id: str, team: str) -> TenantConfig:
        target = _clean(team).lower()
        with self._store.lock(tenant_id):
            cfg = self._store.ensure(tenant_id)
            teams = [t for t in cfg.team_filters if t.lower() != target]
            if len(teams) == len(cfg.team_filters):
                return cfg
            return self._update(tenant_id, team_filters=teams)

    def clear_team_filters(self, tenant_id: str) -> TenantConfig:
        return self._update(tenant_id, team_filters=[])

    def reset_filters(self, tenant_id: str) -> TenantConfig:
        """Back to default categories and genders, no team filters."""
        return self._update(
            tenant_id,
            category_filters=list(DEFAULT_CATEGORY_FILTERS),
            gender_filters=list(DEFAULT_GENDER_FILTERS),
            team_filters=[],
        )

    # =========================================================================
    # DAILY TIME AND PINGS
    # =========================================================================

    def set_daily_time(self, tenant_id: str, hhmm: str) -> TenantConfig:
        """Set the daily HHMM slot; both daily branches re-initialize on their next tick."""
        return self._update(tenant_id, **_daily_time_fields(hhmm))

    def set_ping_enabled(self, tenant_id: str, enabled: bool) -> TenantConfig:
        return self._update(tenant_id, ping_enabled=enabled)

    def add_ping_role(self, tenant_id: str, role_id: str) -> TenantConfig:
        role_id = _clean(role_id)
        if not role_id.isdigit():
            raise InvalidTenantSetting(f"Role id must be numeric, got {role_id!r}")
        with self._store.lock(tenant_id):
            cfg = self._store.ensure(tenant_id)
            if role_id in cfg.ping_role_ids:
                return cfg
            return self._update(tenant_id, ping_role_ids=[*cfg.ping_role_ids, role_id])

    def remove_ping_role(self, tenant_id: str, role_id: str) -> TenantConfig:
        role_id = _clean(role_id)
        with self._store.lock(tenant_id):
            cfg = self._store.ensure(tenant_id)
            if role_id not in cfg.ping_role_ids:
                return cfg
            roles = [r for r in cfg.ping_role_ids if r != role_id]
            return self._update(tenant_id, ping_role_ids=roles)

    def send_ping_test(self, tenant_id: str) -> bool:
        """Post the tenant's role mentions (or a notice that pings are off) to its channel.

        Raises:
            InvalidTenantSetting: if the tenant has no channel or no publisher is set
        """
        cfg = self.get_or_create(tenant_id)
        if not cfg.channel_target:
            raise InvalidTenantSetting("No channel configured")
        if self._publisher is None:
            raise InvalidTenantSetting("No publisher available for ping tests")

        mentions = mention_policy(cfg)
        post = Post(
            channel_target=cfg.channel_target,
            content=mentions.content() or PING_TEST_DISABLED,
            mentions=mentions,
        )
        try:
            sent = bool(self._publisher.post(post))
        except PublishError as e:
            logger.warning("[TENANT] Ping test for %s failed: %s", tenant_id, e)
            sent = False
        logger.info("[TENANT] Ping test for %s: %s", tenant_id, "sent" if sent else "failed")
        return sent

    # =========================================================================
    # MATCH SELECTION
    # =========================================================================

    def select_match(self, tenant_id: str, match_id: str) -> TenantConfig:
        """Track a match. Switches the tenant to custom mode and polls on the next tick."""
        match_id = _clean(match_id)
        if not match_id:
            raise InvalidTenantSetting("Match id must not be empty")
        with self._store.lock(tenant_id):
            cfg = self._store.ensure(tenant_id)
            selected = list(cfg.selected_match_ids)
            if match_id not in selected:
                selected.append(match_id)
            return self._update(
                tenant_id,
                selected_match_ids=selected,
                mode=TenantMode.CUSTOM,
                next_due_custom=None,
            )

    def unselect_match(self, tenant_id: str, match_id: str) -> TenantConfig:
        match_id = _clean(match_id)
        with self._store.lock(tenant_id):
            cfg = self._store.ensure(tenant_id)
            if match_id not in cfg.selected_match_ids:
                return cfg
            selected = [m for m in cfg.selected_match_ids if m != match_id]
            return self._update(tenant_id, selected_match_ids=selected)

    # =========================================================================
    # PAUSE
    # =========================================================================

    def pause(self, tenant_id: str) -> TenantConfig:
        return self._update(tenant_id, is_paused=True)

    def resume(self, tenant_id: str) -> TenantConfig:
        return self._update(tenant_id, is_paused=False)
