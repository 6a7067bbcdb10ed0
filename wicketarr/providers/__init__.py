"""Provider layer - upstream match data sources.

This is the SINGLE place where the match source is constructed.
All other code depends on the MatchSource interface.
"""

import logging

from wicketarr.config import Config
from wicketarr.providers.cricapi import CricAPIClient, CricAPIMatchSource

logger = logging.getLogger(__name__)


def create_match_source() -> CricAPIMatchSource:
    """Factory for the configured match source."""
    if not Config.CRICKET_API_KEY:
        logger.warning(
            "[CRICAPI] CRICKET_API_KEY is not set; upstream requests will be rejected"
        )
    client = CricAPIClient(
        api_key=Config.CRICKET_API_KEY,
        base_url=Config.CRICKET_API_BASE_URL,
        timeout=float(Config.CRICKET_API_TIMEOUT),
        page_size=Config.CRICKET_API_PAGE_SIZE,
    )
    return CricAPIMatchSource(client)


__all__ = [
    "CricAPIClient",
    "CricAPIMatchSource",
    "create_match_source",
]
