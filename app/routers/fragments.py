"""Time fragment endpoints."""

from fastapi import APIRouter, HTTPException

from app.models import TimeRange
from app.services import time_range

router = APIRouter(prefix="/time", tags=["time"])


@router.get("/parse", response_model=TimeRange)
async def parse_time(url: str):
    """Extract the start/stop seconds from a navigation URL."""
    try:
        return time_range.parse(url)
    except time_range.MalformedTimeFragment as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/format")
async def format_time(start: int, stop: int):
    """Canonical /time/{start},{stop}/ fragment."""
    try:
        span = TimeRange(start=start, stop=stop)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"fragment": time_range.format_range(span)}


@router.get("/replace")
async def replace_time(url: str, stop: int):
    """Keep the URL's start and substitute a new stop."""
    try:
        return {"url": time_range.replace_stop(url, stop)}
    except time_range.MalformedTimeFragment as e:
        raise HTTPException(status_code=400, detail=str(e))
