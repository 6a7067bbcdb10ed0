"""FastAPI dependencies.

Components are built once in the application lifespan and kept on
app.state; routes reach them through these functions.
"""

from fastapi import Request

from wicketarr.consumers.scheduler import TickScheduler
from wicketarr.services import MatchService, TenantService


def get_tenant_service(request: Request) -> TenantService:
    return request.app.state.tenant_service


def get_match_service(request: Request) -> MatchService:
    return request.app.state.match_service


def get_tick_scheduler(request: Request) -> TickScheduler:
    return request.app.state.scheduler
