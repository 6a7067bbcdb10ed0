"""Scheduler API endpoints."""

from fastapi import APIRouter, Depends

from wicketarr.api.dependencies import get_tick_scheduler
from wicketarr.consumers.scheduler import TickScheduler

router = APIRouter()


@router.get("/scheduler/status")
def scheduler_status(scheduler: TickScheduler = Depends(get_tick_scheduler)) -> dict:
    return scheduler.status()


@router.post("/scheduler/run")
def run_tick(scheduler: TickScheduler = Depends(get_tick_scheduler)) -> dict:
    """Run one tick now. Skipped if a tick is already in flight."""
    return scheduler.run_once().to_dict()
