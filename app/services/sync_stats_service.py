"""
Sync Statistics Service

Records one SyncRun row per WholeCell sync and answers history queries.
Recording is best-effort: a failure here is logged and never changes the
outcome of the run itself.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.enums import SyncRunStatus, WHOLECELL_SOURCE
from app.models import SyncRun

logger = logging.getLogger(__name__)


class SyncStatsService:
    """Service for managing sync run history."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def record_run(
        self,
        status: SyncRunStatus,
        started_at: datetime,
        synced: int = 0,
        errors: int = 0,
        total: int = 0,
        since: Optional[str] = None,
        checkpoint_advanced: bool = False,
        message: Optional[str] = None,
        source: str = WHOLECELL_SOURCE,
    ) -> Optional[SyncRun]:
        """
        Persist the outcome of a sync run.

        Args:
            status: success, partial or error
            started_at: Instant the run started (also the candidate checkpoint)
            synced / errors / total: Final per-record counts
            since: Checkpoint the run fetched from, if any
            checkpoint_advanced: Whether the run moved the checkpoint
            message: Completion or abort message shown to the operator

        Returns:
            The stored SyncRun, or None if it could not be written
        """
        finished_at = datetime.now(timezone.utc)
        try:
            run = SyncRun(
                source=source,
                status=status.value,
                started_at=started_at,
                finished_at=finished_at,
                duration_seconds=round((finished_at - started_at).total_seconds(), 1),
                synced=synced,
                errors=errors,
                total=total,
                since=since,
                checkpoint_advanced=checkpoint_advanced,
                message=message,
            )
            self.db.add(run)
            await self.db.commit()
            logger.info(f"Recorded {source} sync run: {status.value} ({synced}/{total}, {errors} errors)")
            return run
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to record sync run: {str(e)}")
            return None

    async def recent_runs(self, limit: int = 20, source: str = WHOLECELL_SOURCE) -> List[SyncRun]:
        stmt = (
            select(SyncRun)
            .where(SyncRun.source == source)
            .order_by(SyncRun.started_at.desc(), SyncRun.id.desc())
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def last_run(self, source: str = WHOLECELL_SOURCE) -> Optional[SyncRun]:
        runs = await self.recent_runs(limit=1, source=source)
        return runs[0] if runs else None
