"""API route modules."""

from wicketarr.api.routes import health, matches, scheduler, tenants

__all__ = ["health", "matches", "scheduler", "tenants"]
