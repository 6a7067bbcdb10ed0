"""Background tick scheduler.

Uses a cron expression (every minute by default) to drive one tick. Each
tick walks all tenants sequentially and runs the TenantProcessor for every
enabled one. Tenant-specific cadences (live poll interval, idle backoff,
daily HHMM slots) are enforced by the processor through the next_due_*
fields, not by the tick cadence.

Integrates with FastAPI lifespan for clean startup/shutdown.
"""

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime

from croniter import croniter

from wicketarr.config import SchedulerSettings
from wicketarr.consumers.tenant_processor import ProcessResult, TenantProcessor
from wicketarr.consumers.throttle import PostThrottle
from wicketarr.core.exceptions import PersistenceError
from wicketarr.core.interfaces import MatchSource, Publisher, TenantStateStore
from wicketarr.utilities.tz import now_epoch

logger = logging.getLogger(__name__)


@dataclass
class TickResult:
    """Summary of one tick across all tenants."""

    started_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    completed_at: datetime | None = None
    overlapped: bool = False
    tenants_seen: int = 0
    tenants_processed: int = 0
    tenants_skipped: int = 0
    posts: int = 0
    failed_posts: int = 0
    results: list[ProcessResult] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dict for JSON serialization."""
        return {
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "overlapped": self.overlapped,
            "tenants_seen": self.tenants_seen,
            "tenants_processed": self.tenants_processed,
            "tenants_skipped": self.tenants_skipped,
            "posts": self.posts,
            "failed_posts": self.failed_posts,
            "results": [r.to_dict() for r in self.results],
            "errors": self.errors,
        }


class TickScheduler:
    """Background scheduler running the per-tenant state machine.

    Owns the PostThrottle for the lifetime of the process and hands it to
    the TenantProcessor. At most one tick is in flight: a tick that starts
    while another is still running is skipped.

    Usage:
        scheduler = TickScheduler(store, source, publisher, settings)
        scheduler.start()
        # ... application runs ...
        scheduler.stop()

    Tests drive it synchronously:
        result = scheduler.run_once()
    """

    def __init__(
        self,
        store: TenantStateStore,
        source: MatchSource,
        publisher: Publisher,
        settings: SchedulerSettings | None = None,
        clock: Callable[[], float] = now_epoch,
    ):
        self._store = store
        self._settings = settings or SchedulerSettings()
        self._clock = clock
        self._throttle = PostThrottle(grace_seconds=self._settings.throttle_grace_seconds)
        self._processor = TenantProcessor(
            source=source,
            publisher=publisher,
            store=store,
            throttle=self._throttle,
            settings=self._settings,
        )

        self._tick_lock = threading.Lock()
        self._thread: threading.Thread | None = None
        self._stop_event = threading.Event()
        self._running = False
        self._last_run: datetime | None = None
        self._next_run: datetime | None = None
        self._last_result: TickResult | None = None

    @property
    def is_running(self) -> bool:
        """Check if scheduler is running."""
        return self._running and self._thread is not None and self._thread.is_alive()

    @property
    def throttle(self) -> PostThrottle:
        return self._throttle

    @property
    def processor(self) -> TenantProcessor:
        return self._processor

    @property
    def cron_expression(self) -> str:
        return self._settings.tick_cron

    @property
    def last_run(self) -> datetime | None:
        return self._last_run

    @property
    def next_run(self) -> datetime | None:
        return self._next_run

    @property
    def last_result(self) -> TickResult | None:
        return self._last_result

    def start(self) -> bool:
        """Start the scheduler thread.

        Returns:
            True if started, False if already running or the cron is invalid
        """
        if self.is_running:
            logger.warning("[TICK] Scheduler already running")
            return False

        try:
            croniter(self.cron_expression)
        except (KeyError, ValueError) as e:
            logger.error("[TICK] Invalid cron expression '%s': %s", self.cron_expression, e)
            return False

        self._stop_event.clear()
        self._running = True
        self._thread = threading.Thread(
            target=self._run_loop,
            name="tick-scheduler",
            daemon=True,
        )
        self._thread.start()
        logger.info("[TICK] Scheduler started (expression: %s)", self.cron_expression)
        return True

    def stop(self, timeout: float = 30.0) -> bool:
        """Stop the scheduler gracefully.

        Returns:
            True if stopped, False if timeout
        """
        if not self.is_running:
            return True

        logger.info("[TICK] Stopping scheduler...")
        self._stop_event.set()
        self._running = False

        if self._thread:
            self._thread.join(timeout=timeout)
            if self._thread.is_alive():
                logger.warning("[TICK] Scheduler thread did not stop in time")
                return False

        logger.info("[TICK] Scheduler stopped")
        return True

    def status(self) -> dict:
        return {
            "running": self.is_running,
            "cron_expression": self.cron_expression,
            "last_run": self._last_run.isoformat() if self._last_run else None,
            "next_run": self._next_run.isoformat() if self._next_run else None,
            "tracked_matches": len(self._throttle),
            "last_result": self._last_result.to_dict() if self._last_result else None,
        }

    def _run_loop(self) -> None:
        """Main scheduler loop - runs in background thread."""
        while not self._stop_event.is_set():
            cron = croniter(self.cron_expression, datetime.now(UTC))
            self._next_run = cron.get_next(datetime)

            wait_seconds = (self._next_run - datetime.now(UTC)).total_seconds()
            logger.debug(
                "[TICK] Next tick at %s (%.0fs)",
                self._next_run.strftime("%Y-%m-%d %H:%M:%S"),
                wait_seconds,
            )

            # Wait until next run time (checking stop event every second)
            while wait_seconds > 0 and not self._stop_event.is_set():
                time.sleep(min(1.0, wait_seconds))
                wait_seconds = (self._next_run - datetime.now(UTC)).total_seconds()

            if self._stop_event.is_set():
                return

            try:
                self.run_once()
            except Exception as e:
                logger.exception("[TICK] Error in scheduler run: %s", e)

    def run_once(self) -> TickResult:
        """Run one tick over all tenants.

        Skips (and reports overlapped=True) if a tick is already running.
        """
        if not self._tick_lock.acquire(blocking=False):
            logger.warning("[TICK] Previous tick still running, skipping")
            return TickResult(overlapped=True, completed_at=datetime.now(UTC))

        try:
            return self._run_tick()
        finally:
            self._tick_lock.release()

    def _run_tick(self) -> TickResult:
        result = TickResult()
        now = self._clock()

        try:
            tenants = self._store.list_tenants()
        except PersistenceError as e:
            logger.error("[TICK] Could not list tenants: %s", e)
            result.errors.append(str(e))
            tenants = []

        result.tenants_seen = len(tenants)
        for listed in tenants:
            if not listed.is_enabled:
                result.tenants_skipped += 1
                continue
            try:
                with self._store.lock(listed.tenant_id):
                    # Re-read under the lock so an admin write just made is seen
                    cfg = self._store.get(listed.tenant_id)
                    if cfg is None or not cfg.is_enabled:
                        result.tenants_skipped += 1
                        continue
                    processed = self._processor.process(cfg, now)
            except Exception as e:
                logger.exception("[TICK] Tenant %s failed: %s", listed.tenant_id, e)
                result.errors.append(f"{listed.tenant_id}: {e}")
                continue

            result.tenants_processed += 1
            result.posts += processed.posts
            result.failed_posts += processed.failed_posts
            result.results.append(processed)

        result.completed_at = datetime.now(UTC)
        self._last_run = result.completed_at
        self._last_result = result
        if result.posts or result.errors:
            logger.info(
                "[TICK] %d tenants processed, %d skipped, %d posts, %d errors",
                result.tenants_processed,
                result.tenants_skipped,
                result.posts,
                len(result.errors),
            )
        return result


# =============================================================================
# MODULE-LEVEL FUNCTIONS
# =============================================================================

_scheduler: TickScheduler | None = None


def start_tick_scheduler(scheduler: TickScheduler, enabled: bool = True) -> bool:
    """Register and start the global tick scheduler.

    Returns:
        True if started, False if disabled or already running
    """
    global _scheduler

    if not enabled:
        logger.info("[TICK] Scheduler disabled in settings")
        return False

    if _scheduler and _scheduler.is_running:
        logger.warning("[TICK] Scheduler already running")
        return False

    _scheduler = scheduler
    return _scheduler.start()


def stop_tick_scheduler(timeout: float = 30.0) -> bool:
    """Stop the global tick scheduler."""
    global _scheduler

    if not _scheduler:
        return True

    result = _scheduler.stop(timeout)
    _scheduler = None
    return result


def is_scheduler_running() -> bool:
    """Check if the global scheduler is running."""
    return _scheduler is not None and _scheduler.is_running


def get_scheduler_status() -> dict:
    """Get status of the global scheduler."""
    if not _scheduler:
        return {"running": False}
    return _scheduler.status()
