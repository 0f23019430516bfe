"""
Schemas for the WholeCell sync endpoints and the events they stream.
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel

from .base import BaseSchema


class SyncProgressEvent(BaseModel):
    type: Literal["progress"] = "progress"
    progress: int
    synced: int
    errors: int = 0
    total: int


class SyncCompleteEvent(BaseModel):
    type: Literal["complete"] = "complete"
    success: bool = True
    synced: int
    errors: int
    total: int
    message: Optional[str] = None


class SyncErrorEvent(BaseModel):
    type: Literal["error"] = "error"
    message: str


class SyncRunRead(BaseSchema):
    id: int
    source: str
    status: str
    started_at: datetime
    finished_at: Optional[datetime] = None
    duration_seconds: Optional[float] = None
    synced: int
    errors: int
    total: int
    since: Optional[str] = None
    checkpoint_advanced: bool
    message: Optional[str] = None


class SyncStatusRead(BaseSchema):
    running: bool
    checkpoint: Optional[str] = None
    last_run: Optional[SyncRunRead] = None
