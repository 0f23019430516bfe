"""
Sync Run Model

One row per WholeCell sync run, written after the run completes or aborts.
"""

from sqlalchemy import Column, Integer, String, Float, Boolean, Text
from sqlalchemy.sql import func
from app.database import Base, UTCDateTime


class SyncRun(Base):
    __tablename__ = "sync_runs"

    id = Column(Integer, primary_key=True, index=True)
    source = Column(String, nullable=False, index=True)
    status = Column(String, nullable=False)  # success, partial, error

    started_at = Column(UTCDateTime, nullable=False, index=True)
    finished_at = Column(UTCDateTime, nullable=True)
    duration_seconds = Column(Float, nullable=True)

    synced = Column(Integer, default=0)
    errors = Column(Integer, default=0)
    total = Column(Integer, default=0)

    since = Column(String, nullable=True)  # checkpoint the run fetched from
    checkpoint_advanced = Column(Boolean, default=False)
    message = Column(Text, nullable=True)

    created_at = Column(UTCDateTime, server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<SyncRun(id={self.id}, source={self.source}, status={self.status}, synced={self.synced}, errors={self.errors})>"
