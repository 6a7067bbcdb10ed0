"""Post throttle for custom live tracking.

Process-lifetime map of tracking key (tenant and match id) -> epoch
seconds of the last successful score update. Owned by the tick scheduler
and handed to the tenant processor. Never persisted: after a restart
every tracked match is due immediately.
"""

import threading


class PostThrottle:
    """Thread-safe last-posted bookkeeping keyed by tracking key.

    Usage:
        throttle = PostThrottle(grace_seconds=5)
        if throttle.is_due(key, now, interval_seconds=600):
            publish(...)
            throttle.mark_posted(key, now)
    """

    def __init__(self, grace_seconds: int = 5):
        self._grace = grace_seconds
        self._last_posted: dict[str, float] = {}
        self._lock = threading.Lock()

    @property
    def grace_seconds(self) -> int:
        return self._grace

    def last_posted(self, key: str) -> float | None:
        with self._lock:
            return self._last_posted.get(key)

    def is_due(self, key: str, now: float, interval_seconds: int) -> bool:
        """At least interval minus grace has elapsed since the last post. Unknown keys are due."""
        with self._lock:
            last = self._last_posted.get(key)
        if last is None:
            return True
        return now - last >= interval_seconds - self._grace

    def mark_posted(self, key: str, now: float) -> None:
        with self._lock:
            self._last_posted[key] = now

    def forget(self, key: str) -> None:
        with self._lock:
            self._last_posted.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._last_posted.clear()

    def snapshot(self) -> dict[str, float]:
        """Copy of the current entries (for status reporting)."""
        with self._lock:
            return dict(self._last_posted)

    def __len__(self) -> int:
        with self._lock:
            return len(self._last_posted)
