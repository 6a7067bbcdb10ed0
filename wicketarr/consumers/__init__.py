"""Consumer layer - classification, filtering and scheduling.

The tenant processor and tick scheduler live in
wicketarr.consumers.tenant_processor and wicketarr.consumers.scheduler.
"""

from wicketarr.consumers.classifier import (
    classify_category,
    classify_gender,
    is_finished,
    is_live,
    is_regional_domestic,
    is_scheduled_today_or_live,
)
from wicketarr.consumers.filters import (
    TenantFilters,
    is_fallback_relevant,
    is_relevant,
    is_tomorrow_relevant,
)
from wicketarr.consumers.throttle import PostThrottle

__all__ = [
    "PostThrottle",
    "TenantFilters",
    "classify_category",
    "classify_gender",
    "is_fallback_relevant",
    "is_finished",
    "is_live",
    "is_regional_domestic",
    "is_relevant",
    "is_scheduled_today_or_live",
    "is_tomorrow_relevant",
]
