"""Publishers - deliver posts to tenant channels."""

import os

from wicketarr.publishers.webhook import LoggingPublisher, WebhookPublisher, build_payload


def create_publisher() -> WebhookPublisher | LoggingPublisher:
    """Factory for the configured publisher.

    PUBLISHER=log selects the dry-run LoggingPublisher; anything else posts
    to webhooks.
    """
    if os.getenv("PUBLISHER", "webhook").lower() == "log":
        return LoggingPublisher()
    return WebhookPublisher()


__all__ = [
    "LoggingPublisher",
    "WebhookPublisher",
    "build_payload",
    "create_publisher",
]
