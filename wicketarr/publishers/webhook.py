"""Publishers.

WebhookPublisher posts JSON messages to a chat webhook URL (the tenant's
channel target). LoggingPublisher only logs, for dry runs.

Both implement the Publisher protocol and never raise: failures are
logged and reported as False.
"""

import logging
import threading

import httpx

from wicketarr.core.interfaces import Post

logger = logging.getLogger(__name__)


def build_payload(post: Post) -> dict:
    """Webhook JSON body for a post, including its mention policy."""
    payload: dict = {
        "allowed_mentions": {"parse": [], "roles": list(post.mentions.role_ids)},
    }
    if post.content:
        payload["content"] = post.content
    if post.embeds:
        payload["embeds"] = post.embeds
    return payload


class WebhookPublisher:
    """Posts to the channel target URL with httpx."""

    def __init__(
        self,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.Client | None = None
        self._lock = threading.Lock()

    def _get_client(self) -> httpx.Client:
        if self._client is None:
            with self._lock:
                if self._client is None:
                    self._client = httpx.Client(timeout=self._timeout, transport=self._transport)
        return self._client

    def close(self) -> None:
        with self._lock:
            if self._client:
                self._client.close()
                self._client = None

    def post(self, post: Post) -> bool:
        if not post.channel_target.startswith(("http://", "https://")):
            logger.warning("[PUBLISH] Channel target is not a webhook URL, dropping post")
            return False
        try:
            response = self._get_client().post(post.channel_target, json=build_payload(post))
            response.raise_for_status()
            return True
        except httpx.HTTPStatusError as e:
            logger.warning("[PUBLISH] Webhook returned HTTP %s", e.response.status_code)
        except (httpx.RequestError, RuntimeError, OSError) as e:
            logger.warning("[PUBLISH] Webhook request failed: %s", e)
        return False


class LoggingPublisher:
    """Logs posts instead of sending them."""

    def post(self, post: Post) -> bool:
        logger.info(
            "[PUBLISH] %s: content=%r embeds=%d pings=%s",
            post.channel_target,
            post.content,
            len(post.embeds),
            post.mentions.pings,
        )
        return True
