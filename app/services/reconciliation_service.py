# app/services/reconciliation_service.py
"""
WholeCell -> local inventory reconciliation.

One run:
    1. Read the checkpoint (start instant of the last clean run) and note the
       start instant of this run before anything is fetched.
    2. Fetch every matching WholeCell record updated since the checkpoint
       (everything when there is no checkpoint).
    3. Map and upsert each record by wholecell_id, one at a time, counting
       successes and failures. A bad record is logged and skipped.
    4. Advance the checkpoint to this run's start instant only if no record
       failed, so failed records are fetched again next run.

Progress is published after every record; the stream ends with one complete
event, or one error event if the WholeCell fetch itself failed or the run was
cancelled.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from app.core.enums import ItemStatus, WHOLECELL_CHECKPOINT_KEY
from app.core.exceptions import WholeCellServiceError
from app.services.checkpoint_store import CheckpointStore
from app.services.inventory_store import InventoryStore
from app.services.status_lifecycle import status_for_sync
from app.services.sync_progress import SyncProgressChannel
from app.services.wholecell.client import WholeCellClient
from app.services.wholecell.mapper import map_wholecell_record

logger = logging.getLogger(__name__)

SYNC_CANCELLED_MESSAGE = "WholeCell sync was cancelled before it finished"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class SyncResult:
    synced: int
    errors: int
    total: int
    started_at: datetime
    since: Optional[str] = None
    checkpoint_advanced: bool = False
    message: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "synced": self.synced,
            "errors": self.errors,
            "total": self.total,
            "started_at": self.started_at.isoformat(),
            "since": self.since,
            "checkpoint_advanced": self.checkpoint_advanced,
            "message": self.message,
        }


def completion_message(synced: int, errors: int) -> str:
    if errors:
        return f"Synced {synced} items, {errors} errors. Failed items will be retried on the next sync."
    return f"Synced {synced} items from WholeCell"


class ReconciliationService:
    """Runs WholeCell syncs against the local inventory store."""

    def __init__(
        self,
        item_store: InventoryStore,
        checkpoint_store: CheckpointStore,
        client: WholeCellClient,
        status_filter: Optional[str] = None,
        preserve_local_status: bool = False,
        checkpoint_key: str = WHOLECELL_CHECKPOINT_KEY,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self.item_store = item_store
        self.checkpoint_store = checkpoint_store
        self.client = client
        self.status_filter = status_filter
        self.preserve_local_status = preserve_local_status
        self.checkpoint_key = checkpoint_key
        self.clock = clock

    async def run_sync(self, channel: Optional[SyncProgressChannel] = None) -> SyncResult:
        """
        Run one sync.

        Args:
            channel: Optional progress stream; a private one is used if omitted

        Returns:
            SyncResult with final counts

        Raises:
            WholeCellServiceError: if credentials are missing or any page fetch
                fails. An error event is published first and the checkpoint is
                left as it was.
        """
        channel = channel or SyncProgressChannel()
        try:
            return await self._run(channel)
        except asyncio.CancelledError:
            logger.warning("WholeCell sync cancelled")
            if not channel.terminated:
                await channel.fail(SYNC_CANCELLED_MESSAGE)
            raise
        except Exception as e:
            if not channel.terminated:
                await channel.fail(str(e))
            raise

    async def _run(self, channel: SyncProgressChannel) -> SyncResult:
        since = await self.checkpoint_store.get(self.checkpoint_key)
        started_at = self.clock()
        logger.info(f"Starting WholeCell sync (since={since or 'beginning'}, status={self.status_filter or 'any'})")

        try:
            records = await self.client.fetch_all(status=self.status_filter, updated_since=since)
        except WholeCellServiceError as e:
            logger.error(f"WholeCell sync aborted: {str(e)}")
            raise

        total = len(records)
        if total == 0:
            await self.checkpoint_store.set(self.checkpoint_key, started_at.isoformat())
            logger.info("WholeCell sync found no changed records; checkpoint advanced")
            message = "No new or updated items in WholeCell"
            await channel.complete(0, 0, 0, message)
            return SyncResult(0, 0, 0, started_at, since, checkpoint_advanced=True, message=message)

        synced = 0
        errors = 0
        await channel.progress(synced, errors, total)

        for record in records:
            if await self._reconcile_record(record):
                synced += 1
            else:
                errors += 1
            await channel.progress(synced, errors, total)

        checkpoint_advanced = errors == 0
        if checkpoint_advanced:
            await self.checkpoint_store.set(self.checkpoint_key, started_at.isoformat())
        else:
            logger.warning(f"WholeCell sync had {errors} errors; checkpoint left at {since}")

        message = completion_message(synced, errors)
        logger.info(f"WholeCell sync complete: {synced} synced, {errors} errors, {total} total")
        await channel.complete(synced, errors, total, message)

        return SyncResult(synced, errors, total, started_at, since, checkpoint_advanced, message)

    async def _reconcile_record(self, record: Any) -> bool:
        """Map and upsert one record. Returns False (after logging) on any failure."""
        vendor_id = record.get("id") if isinstance(record, dict) else None
        try:
            mapped = map_wholecell_record(record)
            fields = mapped.to_fields()

            if self.preserve_local_status:
                existing = await self.item_store.get_by_vendor_id(mapped.wholecell_id)
                existing_status = ItemStatus(existing.status) if existing is not None else None
                fields["status"] = status_for_sync(
                    mapped.status, existing_status, preserve_local=True
                ).value

            await self.item_store.upsert(mapped.wholecell_id, fields)
            return True
        except Exception:
            logger.exception(f"Failed to sync WholeCell record {vendor_id}")
            return False
