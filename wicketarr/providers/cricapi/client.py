"""CricAPI HTTP client.

Handles raw HTTP requests to the CricAPI v1 endpoints.
No data transformation - just fetch, paginate and return JSON.

Health Monitoring:
- Tracks request success/failure counts
- Remembers the last upstream error
- Call health_check() to get current status
"""

import logging
import threading
import time
from dataclasses import dataclass
from datetime import datetime

import httpx

from wicketarr.core.exceptions import UpstreamError

logger = logging.getLogger(__name__)

CRICAPI_BASE_URL = "https://api.cricapi.com/v1"

# Upstream returns fixed-size pages
DEFAULT_PAGE_SIZE = 25

# Hard stop in case upstream reports a bogus totalRows
MAX_PAGES = 200


@dataclass
class HealthStats:
    """Health monitoring statistics."""

    requests_total: int = 0
    requests_success: int = 0
    requests_failed: int = 0
    non_success_payloads: int = 0
    last_success: datetime | None = None
    last_failure: datetime | None = None
    last_error: str | None = None


class CricAPIClient:
    """Low-level CricAPI client.

    Every request carries the API key as a query parameter. Failures after
    all retries raise UpstreamError; callers decide whether to degrade.
    """

    def __init__(
        self,
        api_key: str | None,
        base_url: str = CRICAPI_BASE_URL,
        timeout: float = 25.0,
        retry_count: int = 3,
        retry_delay: float = 1.0,
        page_size: int = DEFAULT_PAGE_SIZE,
        transport: httpx.BaseTransport | None = None,
    ):
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._retry_count = max(1, retry_count)
        self._retry_delay = retry_delay
        self._page_size = page_size
        self._transport = transport
        self._client: httpx.Client | None = None
        self._lock = threading.Lock()
        self._health = HealthStats()
        self._health_lock = threading.Lock()

    @property
    def page_size(self) -> int:
        return self._page_size

    def _get_client(self) -> httpx.Client:
        if self._client is None:
            with self._lock:
                # Double-check after acquiring lock
                if self._client is None:
                    self._client = httpx.Client(
                        timeout=self._timeout,
                        limits=httpx.Limits(max_connections=20, max_keepalive_connections=10),
                        transport=self._transport,
                    )
        return self._client

    def close(self) -> None:
        """Close the underlying HTTP client."""
        with self._lock:
            if self._client:
                self._client.close()
                self._client = None

    def _record_success(self) -> None:
        with self._health_lock:
            self._health.requests_total += 1
            self._health.requests_success += 1
            self._health.last_success = datetime.now()

    def _record_failure(self, error: str) -> None:
        with self._health_lock:
            self._health.requests_total += 1
            self._health.requests_failed += 1
            self._health.last_failure = datetime.now()
            self._health.last_error = error

    def _record_non_success(self, reason: str) -> None:
        with self._health_lock:
            self._health.non_success_payloads += 1
            self._health.last_error = reason

    def _request(self, endpoint: str, params: dict | None = None) -> dict:
        """Make HTTP request with retry logic.

        Raises:
            UpstreamError: after the last attempt fails
        """
        url = f"{self._base_url}/{endpoint.lstrip('/')}"
        query = {"apikey": self._api_key or ""}
        if params:
            query.update(params)

        last_error = "no attempts made"
        status_code: int | None = None
        for attempt in range(self._retry_count):
            try:
                response = self._get_client().get(url, params=query)
                response.raise_for_status()
                payload = response.json()
                if not isinstance(payload, dict):
                    raise ValueError("response body is not a JSON object")
                self._record_success()
                return payload
            except httpx.HTTPStatusError as e:
                status_code = e.response.status_code
                last_error = f"HTTP {status_code}"
                logger.warning(
                    "[CRICAPI] HTTP %s for %s (attempt %d/%d)",
                    status_code,
                    endpoint,
                    attempt + 1,
                    self._retry_count,
                )
            except (httpx.RequestError, RuntimeError, OSError) as e:
                # RuntimeError: "Cannot send a request, as the client has been closed"
                last_error = str(e) or e.__class__.__name__
                logger.warning(
                    "[CRICAPI] Request failed for %s: %s (attempt %d/%d)",
                    endpoint,
                    last_error,
                    attempt + 1,
                    self._retry_count,
                )
            except ValueError as e:
                # Invalid JSON is not going to fix itself on retry
                self._record_failure(f"Invalid JSON: {e}")
                raise UpstreamError(f"Invalid JSON from {endpoint}: {e}") from e

            if attempt < self._retry_count - 1 and self._retry_delay:
                time.sleep(self._retry_delay * (attempt + 1))

        self._record_failure(last_error)
        raise UpstreamError(f"{endpoint}: {last_error}", status_code=status_code)

    def get_paginated(self, endpoint: str, params: dict | None = None) -> list[dict]:
        """Fetch every page of a collection endpoint.

        Follows the offset protocol until the reported totalRows is
        exhausted or upstream answers with a non-success status,
        whichever comes first.
        """
        rows: list[dict] = []
        offset = 0
        for _ in range(MAX_PAGES):
            payload = self._request(endpoint, {**(params or {}), "offset": offset})
            if payload.get("status") != "success":
                reason = payload.get("reason") or payload.get("status") or "unknown"
                self._record_non_success(str(reason))
                logger.warning(
                    "[CRICAPI] %s returned non-success at offset %d: %s", endpoint, offset, reason
                )
                break

            data = payload.get("data") or []
            rows.extend(item for item in data if isinstance(item, dict))

            info = payload.get("info") or {}
            try:
                total = int(info.get("totalRows") or 0)
            except (TypeError, ValueError):
                total = 0
            if offset + self._page_size >= total:
                break
            offset += self._page_size
        else:
            logger.warning("[CRICAPI] %s pagination stopped after %d pages", endpoint, MAX_PAGES)

        logger.debug("[CRICAPI] %s returned %d rows", endpoint, len(rows))
        return rows

    def get_current_matches(self) -> list[dict]:
        """Matches upstream considers current (live or recently started)."""
        return self.get_paginated("currentMatches")

    def get_matches(self) -> list[dict]:
        """All scheduled matches upstream knows about."""
        return self.get_paginated("matches")

    def get_match_scorecard(self, match_id: str) -> dict:
        """Raw scorecard payload data for one match.

        Raises:
            UpstreamError: on transport failure or a non-success payload
        """
        payload = self._request("match_scorecard", {"id": match_id})
        if payload.get("status") != "success":
            reason = payload.get("reason") or payload.get("status") or "unknown"
            self._record_non_success(str(reason))
            raise UpstreamError(f"match_scorecard {match_id}: {reason}")
        data = payload.get("data")
        return data if isinstance(data, dict) else {}

    def health_check(self) -> dict:
        """Get health check status.

        Returns dict with:
        - status: "healthy", "degraded", "unhealthy" or "unknown"
        - stats: HealthStats as dict
        - message: Human-readable status message
        """
        with self._health_lock:
            stats = {
                "requests_total": self._health.requests_total,
                "requests_success": self._health.requests_success,
                "requests_failed": self._health.requests_failed,
                "non_success_payloads": self._health.non_success_payloads,
                "last_success": (
                    self._health.last_success.isoformat() if self._health.last_success else None
                ),
                "last_failure": (
                    self._health.last_failure.isoformat() if self._health.last_failure else None
                ),
                "last_error": self._health.last_error,
            }

        total = stats["requests_total"]
        if total == 0:
            status, message = "unknown", "No requests made yet"
        else:
            failure_rate = stats["requests_failed"] / total
            if failure_rate >= 0.5:
                status, message = "unhealthy", f"{failure_rate:.0%} of requests failing"
            elif failure_rate > 0 or stats["non_success_payloads"]:
                status, message = "degraded", "Some requests failed or were rejected"
            else:
                status, message = "healthy", "All requests succeeding"

        return {"status": status, "stats": stats, "message": message}
