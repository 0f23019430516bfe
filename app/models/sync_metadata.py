# app/models/sync_metadata.py
from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from app.database import Base


class SyncMetadata(Base):
    """
    Key/value store for sync bookkeeping.

    The WholeCell checkpoint lives here: the start instant of the last run
    that finished with zero item errors, used as the lower bound of the next
    incremental fetch.
    """
    __tablename__ = "sync_metadata"

    key = Column(String, primary_key=True)
    value = Column(String, nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<SyncMetadata(key='{self.key}', value='{self.value}')>"
