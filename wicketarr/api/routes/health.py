"""Health check endpoint."""

from fastapi import APIRouter, Request

from wicketarr.config import VERSION
from wicketarr.consumers.scheduler import get_scheduler_status

router = APIRouter()


@router.get("/health")
def health_check(request: Request) -> dict:
    """Health check endpoint with scheduler and upstream status."""
    source = getattr(request.app.state, "source", None)
    client = getattr(source, "client", None)
    return {
        "status": "healthy",
        "version": VERSION,
        "scheduler": get_scheduler_status(),
        "upstream": client.health_check() if client is not None else None,
    }
