# app/routes/sync.py
"""
WholeCell sync endpoints.

POST /api/sync starts a run in the background and streams its progress back
as server-sent events. The run does not depend on the stream: if the client
goes away the channel is detached and the run still finishes, advances the
checkpoint and records its SyncRun row.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.config import Settings, get_settings
from app.core.enums import SyncRunStatus, WHOLECELL_CHECKPOINT_KEY
from app.core.exceptions import SyncInProgressError
from app.dependencies import get_db, get_session_factory, get_wholecell_client
from app.schemas.sync import SyncRunRead, SyncStatusRead
from app.services.checkpoint_store import CheckpointStore
from app.services.inventory_store import InventoryStore
from app.services.reconciliation_service import ReconciliationService, SyncResult
from app.services.sync_progress import SyncEvent, SyncProgressChannel, format_sse
from app.services.sync_stats_service import SyncStatsService
from app.services.websockets.manager import manager
from app.services.wholecell.client import WholeCellClient

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["sync"])

# Last run started by this process; only one may be in flight at a time
_active_sync_task: Optional[asyncio.Task] = None


def sync_in_progress() -> bool:
    return _active_sync_task is not None and not _active_sync_task.done()


def ensure_no_active_sync() -> None:
    if sync_in_progress():
        raise SyncInProgressError("A WholeCell sync is already running")


async def broadcast_sync_event(event: SyncEvent) -> None:
    await manager.broadcast({"channel": "wholecell_sync", **event})


async def run_wholecell_sync_background(
    session_factory: async_sessionmaker,
    client: WholeCellClient,
    settings: Settings,
    channel: SyncProgressChannel,
) -> SyncResult:
    """Run one sync on its own session and record the outcome."""
    started_at = datetime.now(timezone.utc)

    async with session_factory() as db:
        service = ReconciliationService(
            item_store=InventoryStore(db),
            checkpoint_store=CheckpointStore(db),
            client=client,
            status_filter=settings.wholecell_status_filter,
            preserve_local_status=settings.SYNC_PRESERVE_LOCAL_STATUS,
        )
        stats = SyncStatsService(db)

        try:
            result = await service.run_sync(channel)
        except Exception as e:
            await stats.record_run(SyncRunStatus.ERROR, started_at, message=str(e))
            raise

        await stats.record_run(
            SyncRunStatus.SUCCESS if result.errors == 0 else SyncRunStatus.PARTIAL,
            result.started_at,
            synced=result.synced,
            errors=result.errors,
            total=result.total,
            since=result.since,
            checkpoint_advanced=result.checkpoint_advanced,
            message=result.message,
        )
        return result


def _log_task_outcome(task: asyncio.Task) -> None:
    if task.cancelled():
        logger.warning("WholeCell sync task was cancelled")
        return
    exc = task.exception()
    if exc is not None:
        logger.warning(f"WholeCell sync run ended with an error: {exc}")


@router.post("/sync")
async def start_sync(
    session_factory: async_sessionmaker = Depends(get_session_factory),
    client: WholeCellClient = Depends(get_wholecell_client),
    settings: Settings = Depends(get_settings),
):
    """Start a WholeCell sync and stream progress as text/event-stream."""
    global _active_sync_task

    try:
        ensure_no_active_sync()
    except SyncInProgressError as e:
        raise HTTPException(status_code=409, detail=str(e))

    channel = SyncProgressChannel(listeners=[broadcast_sync_event])
    task = asyncio.create_task(
        run_wholecell_sync_background(session_factory, client, settings, channel)
    )
    task.add_done_callback(_log_task_outcome)
    _active_sync_task = task
    logger.info("Queued WholeCell sync run")

    async def event_stream():
        try:
            async for event in channel:
                yield format_sse(event)
        finally:
            if not channel.terminated:
                channel.detach()

    return StreamingResponse(
        event_stream(),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )


@router.get("/sync/status", response_model=SyncStatusRead)
async def get_sync_status(db: AsyncSession = Depends(get_db)):
    checkpoint = await CheckpointStore(db).get(WHOLECELL_CHECKPOINT_KEY)
    last_run = await SyncStatsService(db).last_run()
    return SyncStatusRead(
        running=sync_in_progress(),
        checkpoint=checkpoint,
        last_run=SyncRunRead.model_validate(last_run) if last_run else None,
    )


@router.get("/sync/runs", response_model=List[SyncRunRead])
async def list_sync_runs(
    limit: int = Query(20, ge=1),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Most recent sync runs, newest first."""
    return await SyncStatsService(db).recent_runs(limit=min(limit, settings.SYNC_HISTORY_LIMIT))
