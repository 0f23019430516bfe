# app/services/sync_progress.py
"""
Progress stream for a single sync run.

The reconciliation service publishes events in order; one consumer (the
HTTP event stream) reads them back in the same order. Every stream ends with
exactly one terminal event, either `complete` or `error`.

If the consumer goes away the channel is detached: later events are dropped
and the run itself carries on to completion.
"""

import asyncio
import json
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional

from app.core.enums import SyncEventType
from app.core.exceptions import SyncError
from app.schemas.sync import SyncCompleteEvent, SyncErrorEvent, SyncProgressEvent

logger = logging.getLogger(__name__)

SyncEvent = Dict[str, Any]
EventListener = Callable[[SyncEvent], Awaitable[None]]


def progress_percent(processed: int, total: int) -> int:
    if total <= 0:
        return 100
    return round(processed / total * 100)


def progress_event(synced: int, errors: int, total: int) -> SyncEvent:
    return SyncProgressEvent(
        progress=progress_percent(synced + errors, total),
        synced=synced,
        errors=errors,
        total=total,
    ).model_dump()


def complete_event(synced: int, errors: int, total: int, message: Optional[str] = None) -> SyncEvent:
    return SyncCompleteEvent(
        synced=synced,
        errors=errors,
        total=total,
        message=message or None,
    ).model_dump(exclude_none=True)


def error_event(message: str) -> SyncEvent:
    return SyncErrorEvent(message=message).model_dump()


def format_sse(event: SyncEvent) -> str:
    """One server-sent-events frame."""
    return f"data: {json.dumps(event)}\n\n"


class SyncProgressChannel:
    """Ordered, single-consumer queue of sync events."""

    def __init__(self, listeners: Optional[List[EventListener]] = None):
        self._queue: "asyncio.Queue[SyncEvent]" = asyncio.Queue()
        self._listeners = list(listeners or [])
        self._terminated = False
        self._detached = False
        self.history: List[SyncEvent] = []

    @property
    def terminated(self) -> bool:
        return self._terminated

    @property
    def detached(self) -> bool:
        return self._detached

    async def publish(self, event: SyncEvent) -> None:
        if self._terminated:
            raise SyncError(f"Sync stream already terminated, cannot publish {event.get('type')}")

        if event.get("type") in (SyncEventType.COMPLETE.value, SyncEventType.ERROR.value):
            self._terminated = True

        self.history.append(event)
        if not self._detached:
            self._queue.put_nowait(event)

        for listener in self._listeners:
            try:
                await listener(event)
            except Exception as e:
                # Listener failures must not break the run
                logger.warning(f"Sync event listener failed: {e}")

    async def progress(self, synced: int, errors: int, total: int) -> None:
        await self.publish(progress_event(synced, errors, total))

    async def complete(self, synced: int, errors: int, total: int, message: Optional[str] = None) -> None:
        await self.publish(complete_event(synced, errors, total, message))

    async def fail(self, message: str) -> None:
        await self.publish(error_event(message))

    def detach(self) -> None:
        """Consumer disconnected: stop queueing events, keep the run going."""
        if not self._detached:
            logger.info("Sync progress consumer detached; run continues without live updates")
        self._detached = True
        while not self._queue.empty():
            self._queue.get_nowait()

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        while True:
            event = await self._queue.get()
            yield event
            if event.get("type") in (SyncEventType.COMPLETE.value, SyncEventType.ERROR.value):
                return
