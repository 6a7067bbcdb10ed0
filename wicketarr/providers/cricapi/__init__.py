"""CricAPI provider."""

from wicketarr.providers.cricapi.client import CricAPIClient
from wicketarr.providers.cricapi.provider import (
    CricAPIMatchSource,
    parse_match,
    parse_matches,
    parse_scorecard,
)

__all__ = [
    "CricAPIClient",
    "CricAPIMatchSource",
    "parse_match",
    "parse_matches",
    "parse_scorecard",
]
