"""
Stream Routes
"""
from fastapi import APIRouter
import logging

from ..models import StreamStatus, RefreshResult
from ..services.workspace import get_workspace

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/stream", tags=["Stream"])


@router.get("", response_model=StreamStatus)
async def get_stream_status():
    """Текущее окно потока состояний"""
    stream = get_workspace().stream
    return StreamStatus(
        stream_start_time=stream.stream_start_time,
        stream_end_time=stream.stream_end_time,
        stream_dates=stream.stream_dates,
        last_refresh_time=stream.last_refresh_time,
        needs_refresh=stream.needs_refresh(),
        window_hours=stream.window_hours,
    )


@router.post("/refresh", response_model=RefreshResult)
async def refresh_stream():
    """Обновить поток, если наступил новый день"""
    ws = get_workspace()
    refreshed = ws.stream.needs_refresh()
    created = ws.observe()

    if created:
        await ws.persist()
    return RefreshResult(refreshed=refreshed, created_states=len(created))
